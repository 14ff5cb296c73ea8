"""
Terraform operations and the command-line tokens they map to.
"""

from enum import Enum
from typing import Dict, Tuple, Union

from .errors import UnsupportedOperationError


class Operation(Enum):
    """A Terraform subcommand terrarun knows how to invoke."""
    INIT = "init"
    APPLY = "apply"
    PLAN = "plan"
    DESTROY = "destroy"
    TAINT = "taint"
    UNTAINT = "untaint"
    SHOW = "show"
    OUTPUT = "output"
    STATE_LIST = "state-list"
    STATE_SHOW = "state-show"

    @classmethod
    def parse(cls, value: Union["Operation", str]) -> "Operation":
        """
        Resolve an Operation from a member or its string value.

        Raises:
            UnsupportedOperationError: If value is not a known operation
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedOperationError(value) from None


# Leading tokens of each command
COMMAND_TOKENS: Dict[Operation, Tuple[str, ...]] = {
    Operation.INIT: ("init",),
    Operation.APPLY: ("apply",),
    Operation.PLAN: ("plan",),
    Operation.DESTROY: ("destroy",),
    Operation.TAINT: ("taint",),
    Operation.UNTAINT: ("untaint",),
    Operation.SHOW: ("show",),
    Operation.OUTPUT: ("output",),
    Operation.STATE_LIST: ("state", "list"),
    Operation.STATE_SHOW: ("state", "show"),
}

FLAG_AUTO_APPROVE = "-auto-approve"
FLAG_FORCE_COPY = "-force-copy"
FLAG_JSON = "-json"

OPTION_BACKEND_CONFIG = "-backend-config"
OPTION_FROM_MODULE = "-from-module"
OPTION_VAR = "-var"

# Operations that take -auto-approve and -var bindings
VARIABLE_OPERATIONS = frozenset({Operation.APPLY, Operation.PLAN, Operation.DESTROY})

# Operations that act on a single resource address
TARGET_OPERATIONS = frozenset({Operation.TAINT, Operation.UNTAINT, Operation.STATE_SHOW})
