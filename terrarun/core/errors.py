"""
Exceptions raised by terrarun.
"""

from typing import Optional


class TerraformError(Exception):
    """Base class for errors raised while running Terraform."""
    pass


class UnsupportedOperationError(TerraformError):
    """Raised when an operation outside the supported set is requested."""

    def __init__(self, operation):
        self.operation = operation
        super().__init__(f"Unsupported operation: {operation!r}")


class ExecutionError(TerraformError):
    """Raised when the terraform process cannot start or exits non-zero."""

    def __init__(self, message: str, command: str = "", exit_code: Optional[int] = None):
        self.command = command
        self.exit_code = exit_code
        super().__init__(message)


class MalformedOutputError(TerraformError):
    """Raised when captured output cannot be decoded in the expected format."""
    pass


class ModuleFetchError(TerraformError):
    """Raised when a module cannot be cloned into the working directory."""
    pass
