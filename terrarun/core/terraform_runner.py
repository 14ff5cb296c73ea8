"""
Terraform command execution.

TerraformRunner builds the argument vector for an operation, runs the
terraform binary in the project directory through an Executor and
decodes what comes back. The module it works on can optionally be
fetched from git first.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..security.sanitizer import InputSanitizer
from .arguments import CommandOptions, TerraformFlags, TerraformOptions, build_arguments
from .decoder import decode_json, decode_resource, decode_resource_list
from .errors import ExecutionError, MalformedOutputError
from .executor import Executor, SubprocessExecutor
from .module_fetcher import GitModuleFetcher, ModuleFetcher
from .operations import Operation

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a Terraform command execution."""
    command: str  # operation name (e.g. "init", "state-list")
    args: List[str] = field(default_factory=list)
    stdout: bytes = b""
    exit_code: int = 0
    success: bool = True


class TerraformRunner:
    """
    Runs Terraform operations against one project directory.

    Attributes mirror the options terraform accepts:
        module: git URL of the module (for get_module and -from-module)
        version: branch or tag to clone
        inputs: -var bindings for apply, plan and destroy
        backend_config: -backend-config pairs for init
        flags / options: init switches and valued options
    """

    def __init__(
        self,
        directory: str,
        module: str = "",
        version: str = "",
        inputs: Optional[Dict[str, Any]] = None,
        backend_config: Optional[Dict[str, str]] = None,
        flags: Optional[TerraformFlags] = None,
        options: Optional[TerraformOptions] = None,
        terraform_binary: str = "terraform",
        executor: Optional[Executor] = None,
        fetcher: Optional[ModuleFetcher] = None,
        print_output: bool = False,
        debug: bool = False,
    ):
        self.directory = InputSanitizer.sanitize_path(directory)
        self.module = module
        self.version = version
        self.inputs = inputs
        self.backend_config = backend_config
        self.flags = flags
        self.options = options
        self.terraform_binary = terraform_binary
        self.debug = debug
        self.executor: Executor = executor or SubprocessExecutor(print_output=print_output)
        self.fetcher: ModuleFetcher = fetcher or GitModuleFetcher()

    @classmethod
    def from_settings(cls, settings, directory: str, **kwargs) -> "TerraformRunner":
        """
        Create a runner configured from a Settings instance.

        Keyword arguments override values taken from settings.
        """
        print_output = kwargs.pop("print_output", settings.get("print_output", False))
        kwargs.setdefault("terraform_binary", settings.get("terraform_binary", "terraform"))
        kwargs.setdefault("debug", settings.get("debug", False))
        kwargs.setdefault("version", settings.get("modules.version", ""))
        if "executor" not in kwargs:
            kwargs["executor"] = SubprocessExecutor(
                print_output=print_output,
                timeout=settings.get("timeout"),
            )
        return cls(directory, **kwargs)

    def _command_options(self, target: str = "") -> CommandOptions:
        return CommandOptions(
            backend_config=self.backend_config,
            flags=self.flags,
            options=self.options,
            inputs=self.inputs,
            module=self.module,
            target=target,
        )

    def _execute(self, operation: Union[Operation, str], target: str = "") -> CommandResult:
        """Build, log and run one command."""
        args = build_arguments(operation, self._command_options(target))
        op = Operation.parse(operation)

        log = logger.info if self.debug else logger.debug
        log(f"Running: {self.terraform_binary} {' '.join(args)} (in {self.directory})")

        try:
            stdout = self.executor.execute(self.terraform_binary, args, self.directory)
        except ExecutionError as e:
            logger.error(f"terraform {op.value} failed: {e}")
            raise

        return CommandResult(command=op.value, args=args, stdout=stdout)

    def run(self, operation: Union[Operation, str]) -> CommandResult:
        """
        Run an operation using the runner's configured options.

        Raises:
            UnsupportedOperationError: Before anything runs, for unknown operations
            ExecutionError: If terraform fails
        """
        return self._execute(operation)

    def get_module(self):
        """
        Clone the configured module into the project directory.

        Any existing directory contents are replaced.
        """
        if not self.module:
            raise ValueError("No module configured")
        self.fetcher.clone_or_replace(self.module, self.directory, self.version)

    def output(self) -> Dict[str, Any]:
        """Return `terraform output -json` as a dict keyed by output name."""
        result = self._execute(Operation.OUTPUT)
        return decode_json(result.stdout)

    def state(self) -> Dict[str, Any]:
        """Return `terraform show -json` as a dict."""
        result = self._execute(Operation.SHOW)
        return decode_json(result.stdout)

    def resources(self) -> List[str]:
        """List resource addresses in the current state."""
        result = self._execute(Operation.STATE_LIST)
        return decode_resource_list(result.stdout)

    def resource(self, address: str) -> Dict[str, Any]:
        """
        Decode `terraform state show <address>`.

        Raises:
            MalformedOutputError: If the printed block cannot be parsed
        """
        result = self._execute(Operation.STATE_SHOW, target=address)
        try:
            return decode_resource(result.stdout)
        except MalformedOutputError:
            logger.warning(f"Could not decode state for {address}")
            raise

    def taint(self, address: str) -> CommandResult:
        """Mark a resource for recreation."""
        return self._execute(Operation.TAINT, target=address)

    def untaint(self, address: str) -> CommandResult:
        """Clear the tainted mark on a resource."""
        return self._execute(Operation.UNTAINT, target=address)
