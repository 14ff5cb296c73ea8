"""
terrarun - run Terraform commands from Python and decode their output.
"""

from .core import (
    CommandOptions,
    CommandResult,
    Operation,
    TerraformFlags,
    TerraformOptions,
    TerraformRunner,
    build_arguments,
)

__version__ = "0.3.0"

__all__ = [
    "CommandOptions",
    "CommandResult",
    "Operation",
    "TerraformFlags",
    "TerraformOptions",
    "TerraformRunner",
    "build_arguments",
]
