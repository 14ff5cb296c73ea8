"""
Argument vector construction for Terraform commands.

build_arguments() turns an operation and a CommandOptions record into
the exact token list terraform expects. Token order is:

    operation, backend config (init only), flags, options, variables
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

from ..security.sanitizer import InputSanitizer, SecurityError
from .operations import (
    COMMAND_TOKENS,
    FLAG_AUTO_APPROVE,
    FLAG_FORCE_COPY,
    FLAG_JSON,
    OPTION_BACKEND_CONFIG,
    OPTION_FROM_MODULE,
    OPTION_VAR,
    TARGET_OPERATIONS,
    VARIABLE_OPERATIONS,
    Operation,
)

logger = logging.getLogger(__name__)


@dataclass
class TerraformFlags:
    """Boolean switches passed to terraform init."""
    force_copy: bool = False


@dataclass
class TerraformOptions:
    """Valued options passed to terraform init."""
    from_module: bool = False


@dataclass
class CommandOptions:
    """
    Everything a single command can be parameterized with.

    Attributes:
        backend_config: -backend-config key/value pairs (init)
        flags: Boolean switches (init)
        options: Valued options (init)
        inputs: -var bindings (apply, plan, destroy)
        module: Module source used by -from-module
        target: Resource address (taint, untaint, state show)
    """
    backend_config: Optional[Dict[str, str]] = None
    flags: Optional[TerraformFlags] = None
    options: Optional[TerraformOptions] = None
    inputs: Optional[Dict[str, Any]] = None
    module: str = ""
    target: str = ""


# Applied in order; the whole pass repeats until the source stops changing
MODULE_SOURCE_RULES: Tuple[Tuple[Pattern, str], ...] = (
    (re.compile(r":"), "/"),
    (re.compile(r"^(?:https///)+"), ""),
    (re.compile(r"^(?:git@)+"), ""),
    (re.compile(r"(?:\.git)+$"), ""),
)


def rewrite_module_source(source: str) -> str:
    """
    Turn a git URL into the path-like source terraform init -from-module takes.

    "git@github.com:org/repo.git" and "https://github.com/org/repo.git"
    both become "github.com/org/repo". Rewriting a result again leaves it
    unchanged.
    """
    rewritten = source
    while True:
        previous = rewritten
        for pattern, replacement in MODULE_SOURCE_RULES:
            rewritten = pattern.sub(replacement, rewritten)
        if rewritten == previous:
            return rewritten


def build_arguments(
    operation: Union[Operation, str],
    options: Optional[CommandOptions] = None,
) -> List[str]:
    """
    Build the terraform argument vector for an operation.

    Args:
        operation: Operation member or its string value
        options: Command options; defaults to an empty CommandOptions

    Returns:
        Ordered list of argument tokens (binary name not included)

    Raises:
        UnsupportedOperationError: If operation is not supported
        SecurityError: If a name, value or address fails validation
        ValueError: If -from-module is requested without a module
    """
    op = Operation.parse(operation)
    opts = options or CommandOptions()

    args = list(COMMAND_TOKENS[op])

    if op is Operation.INIT:
        _add_backend_config(args, opts.backend_config)
        if opts.flags and opts.flags.force_copy:
            args.append(FLAG_FORCE_COPY)
        if opts.options and opts.options.from_module:
            if not opts.module:
                raise ValueError("from_module requested but no module source given")
            args.extend([OPTION_FROM_MODULE, rewrite_module_source(opts.module)])

    elif op in VARIABLE_OPERATIONS:
        args.append(FLAG_AUTO_APPROVE)
        _add_variables(args, opts.inputs)

    elif op in TARGET_OPERATIONS:
        args.append(InputSanitizer.sanitize_resource_address(opts.target))

    elif op in (Operation.OUTPUT, Operation.SHOW):
        args.append(FLAG_JSON)

    for arg in args:
        if not InputSanitizer.is_safe_command_arg(arg):
            raise SecurityError(f"Unsafe command argument: {arg[:80]!r}")

    logger.debug(f"Built arguments for {op.value}: {args}")
    return args


def _add_backend_config(args: List[str], backend_config: Optional[Dict[str, str]]):
    """Append -backend-config key=value pairs."""
    if not backend_config:
        return
    for key, value in backend_config.items():
        InputSanitizer.sanitize_variable_name(key)
        sanitized = InputSanitizer.format_variable_value(value)
        args.extend([OPTION_BACKEND_CONFIG, f"{key}={sanitized}"])


def _add_variables(args: List[str], inputs: Optional[Dict[str, Any]]):
    """Validate and append -var key=value pairs."""
    if not inputs:
        return
    for name, value in inputs.items():
        InputSanitizer.sanitize_variable_name(name)
        sanitized = InputSanitizer.format_variable_value(value)
        args.extend([OPTION_VAR, f"{name}={sanitized}"])
