"""
Core Terraform functionality for terrarun.

This module provides:
- Building terraform argument vectors
- Executing terraform and fetching modules
- Decoding terraform output
"""

from .arguments import (
    CommandOptions,
    TerraformFlags,
    TerraformOptions,
    build_arguments,
    rewrite_module_source,
)
from .decoder import decode_json, decode_resource, decode_resource_list, strip_ansi
from .errors import (
    ExecutionError,
    MalformedOutputError,
    ModuleFetchError,
    TerraformError,
    UnsupportedOperationError,
)
from .executor import Executor, SubprocessExecutor
from .module_fetcher import GitModuleFetcher, ModuleFetcher
from .operations import Operation
from .terraform_runner import CommandResult, TerraformRunner

__all__ = [
    "CommandOptions",
    "TerraformFlags",
    "TerraformOptions",
    "build_arguments",
    "rewrite_module_source",
    "decode_json",
    "decode_resource",
    "decode_resource_list",
    "strip_ansi",
    "ExecutionError",
    "MalformedOutputError",
    "ModuleFetchError",
    "TerraformError",
    "UnsupportedOperationError",
    "Executor",
    "SubprocessExecutor",
    "GitModuleFetcher",
    "ModuleFetcher",
    "Operation",
    "CommandResult",
    "TerraformRunner",
]
