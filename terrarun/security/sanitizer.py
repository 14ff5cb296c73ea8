"""
Input sanitization and validation for terrarun.

Every token handed to the terraform binary passes through here:
- Working directory paths
- Variable and backend-config names
- Variable values (formatted for -var arguments)
- Resource addresses used by taint, untaint and state show
"""

import json
import os
import re
from typing import Any


class SecurityError(Exception):
    """Raised when a security validation fails."""
    pass


class InputSanitizer:
    """
    Provides input validation and sanitization methods.

    All methods raise SecurityError if validation fails.
    """

    # Terraform identifier: must start with letter/underscore,
    # can contain letters, digits, underscores, hyphens
    VARIABLE_NAME_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_-]*$')

    # type.name, module.x.type.name, data.type.name, type.name[0], type.name["k"]
    RESOURCE_ADDRESS_PATTERN = re.compile(r'^[\w.\[\]":-]+$')

    MAX_VARIABLE_NAME_LENGTH = 255
    MAX_VARIABLE_VALUE_LENGTH = 4096
    MAX_ARGUMENT_LENGTH = 10000

    @staticmethod
    def sanitize_path(path: str) -> str:
        """
        Normalize a working directory path.

        The directory does not have to exist yet: it may be created by
        a module clone before terraform runs in it.

        Args:
            path: Path to validate

        Returns:
            Normalized absolute path

        Raises:
            SecurityError: If path is empty or malformed
        """
        if not path:
            raise SecurityError("Path cannot be empty")

        if '\x00' in path:
            raise SecurityError("Path contains a null byte")

        try:
            abs_path = os.path.realpath(os.path.expanduser(path))
        except (OSError, ValueError) as e:
            raise SecurityError(f"Invalid path: {e}")

        if os.path.exists(abs_path) and not os.path.isdir(abs_path):
            raise SecurityError(f"Path is not a directory: {path}")

        return abs_path

    @staticmethod
    def sanitize_variable_name(name: str) -> str:
        """
        Validate a Terraform variable or backend-config key.

        Rules:
        - Must start with letter or underscore
        - Can contain letters, digits, underscores, hyphens
        - Max length: 255 characters

        Raises:
            SecurityError: If name is invalid
        """
        if not name:
            raise SecurityError("Variable name cannot be empty")

        if len(name) > InputSanitizer.MAX_VARIABLE_NAME_LENGTH:
            raise SecurityError(
                f"Variable name too long (max {InputSanitizer.MAX_VARIABLE_NAME_LENGTH})"
            )

        if not InputSanitizer.VARIABLE_NAME_PATTERN.match(name):
            raise SecurityError(
                f"Invalid variable name '{name}': must start with letter/underscore, "
                "contain only letters, digits, underscores, hyphens"
            )

        return name

    @staticmethod
    def format_variable_value(value: Any) -> str:
        """
        Convert a variable value to its -var string form.

        Booleans become true/false, numbers are written in decimal,
        lists and dicts are JSON encoded, None becomes an empty string.

        Args:
            value: Value to convert

        Returns:
            String representation suitable for a key=value argument

        Raises:
            SecurityError: If value is unsafe or too long
        """
        if value is None:
            return ""

        if isinstance(value, bool):
            return "true" if value else "false"

        if isinstance(value, (int, float)):
            return str(value)

        if isinstance(value, (list, tuple, dict)):
            try:
                encoded = json.dumps(value)
            except (TypeError, ValueError) as e:
                raise SecurityError(f"Value is not JSON encodable: {e}")
            InputSanitizer._check_length(encoded)
            return encoded

        str_value = str(value)
        InputSanitizer._check_length(str_value)

        if '\x00' in str_value:
            raise SecurityError("Value contains a null byte")

        return str_value

    @staticmethod
    def _check_length(value: str):
        if len(value) > InputSanitizer.MAX_VARIABLE_VALUE_LENGTH:
            raise SecurityError(
                f"Variable value too long (max {InputSanitizer.MAX_VARIABLE_VALUE_LENGTH})"
            )

    @staticmethod
    def sanitize_resource_address(address: str) -> str:
        """
        Validate a resource address such as "module.vpc.aws_vpc.main".

        Raises:
            SecurityError: If address is empty or has unexpected characters
        """
        if not address or not InputSanitizer.RESOURCE_ADDRESS_PATTERN.match(address):
            raise SecurityError(f"Invalid resource address: {address}")
        return address

    @staticmethod
    def is_safe_command_arg(arg: str) -> bool:
        """
        Check if a command argument is safe to pass to subprocess.

        Commands always run with shell=False; this catches null bytes
        and oversized arguments on top of that.
        """
        if '\x00' in arg:
            return False

        if len(arg) > InputSanitizer.MAX_ARGUMENT_LENGTH:
            return False

        return True
