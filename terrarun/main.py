"""
terrarun - command line entry point.

Runs a single Terraform operation in a project directory and prints
decoded output as JSON.
"""

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from terrarun.config import Settings
from terrarun.core import (
    Operation,
    TerraformError,
    TerraformFlags,
    TerraformOptions,
    TerraformRunner,
)
from terrarun.security import SecurityError
from terrarun.utils import setup_logging, validate_terraform_installed

logger = logging.getLogger(__name__)

TARGET_REQUIRED = (Operation.TAINT, Operation.UNTAINT, Operation.STATE_SHOW)


def _parse_pairs(pairs: List[str], option: str) -> Dict[str, str]:
    """Turn ["k=v", ...] into a dict, rejecting entries without '='."""
    result = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"{option} expects key=value, got {pair!r}")
        result[key] = value
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terrarun",
        description="Run a Terraform operation and decode its output.",
    )
    parser.add_argument(
        "operation",
        choices=[op.value for op in Operation],
        help="Operation to run",
    )
    parser.add_argument("-C", "--directory", required=True, help="Terraform project directory")
    parser.add_argument("--module", default="", help="Module git URL")
    parser.add_argument("--version", dest="module_version", default=None, help="Module branch or tag")
    parser.add_argument("--fetch", action="store_true", help="Clone the module into the directory first")
    parser.add_argument("--var", action="append", default=[], metavar="KEY=VALUE")
    parser.add_argument("--backend-config", action="append", default=[], metavar="KEY=VALUE")
    parser.add_argument("--force-copy", action="store_true")
    parser.add_argument("--from-module", action="store_true")
    parser.add_argument("--target", default="", help="Resource address for taint, untaint and state-show")
    parser.add_argument("--config-dir", default=None, help="Directory containing settings.json")
    parser.add_argument("--log-level", default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for terrarun."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings(config_dir=args.config_dir)
    setup_logging(
        log_level=args.log_level or settings.get("log_level", "INFO"),
        log_file=settings.get("log_file", False),
    )

    operation = Operation(args.operation)
    if operation in TARGET_REQUIRED and not args.target:
        parser.error(f"{operation.value} requires --target")

    try:
        inputs = _parse_pairs(args.var, "--var")
        backend_config = _parse_pairs(args.backend_config, "--backend-config")
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    binary = settings.get("terraform_binary", "terraform")
    installed, version = validate_terraform_installed(binary)
    if not installed:
        logger.error(f"Terraform binary not found: {binary}")
        return 1
    logger.debug(f"Using {version}")

    kwargs = {}
    if args.module_version is not None:
        kwargs["version"] = args.module_version

    try:
        runner = TerraformRunner.from_settings(
            settings,
            args.directory,
            module=args.module,
            inputs=inputs or None,
            backend_config=backend_config or None,
            flags=TerraformFlags(force_copy=args.force_copy),
            options=TerraformOptions(from_module=args.from_module),
            **kwargs,
        )

        if args.fetch:
            runner.get_module()

        if operation is Operation.OUTPUT:
            decoded = runner.output()
        elif operation is Operation.SHOW:
            decoded = runner.state()
        elif operation is Operation.STATE_LIST:
            decoded = runner.resources()
        elif operation is Operation.STATE_SHOW:
            decoded = runner.resource(args.target)
        elif operation is Operation.TAINT:
            runner.taint(args.target)
            return 0
        elif operation is Operation.UNTAINT:
            runner.untaint(args.target)
            return 0
        else:
            runner.run(operation)
            return 0

    except (TerraformError, SecurityError, ValueError) as e:
        logger.error(str(e))
        return 1

    print(json.dumps(decoded, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
