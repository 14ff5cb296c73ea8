"""
Process execution for terraform commands.

TerraformRunner talks to an Executor; SubprocessExecutor is the default
one and runs the binary with subprocess. Tests and embedding
applications can supply their own.
"""

import logging
import subprocess
import sys
import threading
from typing import IO, List, Optional, Protocol

from ..utils import subprocess_creation_flags
from .errors import ExecutionError

logger = logging.getLogger(__name__)


class Executor(Protocol):
    """Runs a binary and returns its captured standard output."""

    def execute(self, command: str, args: List[str], directory: str) -> bytes:
        ...


class SubprocessExecutor:
    """
    Runs commands with subprocess.Popen.

    - shell=False always
    - stderr goes straight to the caller's stderr
    - stdout is captured in full and, with print_output, echoed line by
      line to writer as it arrives
    - optional timeout covering the whole run, after which the process
      is terminated and reaped
    """

    def __init__(
        self,
        print_output: bool = False,
        writer: Optional[IO[str]] = None,
        timeout: Optional[float] = None,
    ):
        self.print_output = print_output
        self.writer = writer
        self.timeout = timeout
        self._process: Optional[subprocess.Popen] = None

    def cancel(self):
        """Terminate any running subprocess."""
        if self._process is not None:
            try:
                self._process.terminate()
            except OSError:
                pass

    def execute(self, command: str, args: List[str], directory: str) -> bytes:
        """
        Run `command args...` in directory and return its stdout.

        Raises:
            ExecutionError: If the process cannot start, times out or
                exits with a non-zero code
        """
        cmd = [command] + list(args)
        label = " ".join(args[:2])
        chunks: List[bytes] = []
        writer = self.writer or sys.stdout

        try:
            self._process = subprocess.Popen(
                cmd,
                cwd=directory,
                stdout=subprocess.PIPE,
                stderr=None,
                shell=False,
                creationflags=subprocess_creation_flags(),
            )
        except OSError as e:
            raise ExecutionError(
                f"Failed to start {command}: {e}", command=label
            ) from e

        # The deadline covers reading stdout, not just the final wait
        timed_out = threading.Event()
        timer: Optional[threading.Timer] = None
        if self.timeout:
            process = self._process

            def _on_timeout():
                timed_out.set()
                try:
                    process.terminate()
                except OSError:
                    pass

            timer = threading.Timer(self.timeout, _on_timeout)
            timer.daemon = True
            timer.start()

        try:
            assert self._process.stdout is not None
            for line in self._process.stdout:
                chunks.append(line)
                if self.print_output:
                    writer.write(line.decode("utf-8", errors="replace"))

            self._process.wait()
            exit_code = self._process.returncode
        finally:
            if timer is not None:
                timer.cancel()
            self._process = None

        if timed_out.is_set() and exit_code != 0:
            raise ExecutionError(
                f"{command} {label} timed out after {self.timeout}s",
                command=label,
                exit_code=exit_code,
            )

        if exit_code != 0:
            raise ExecutionError(
                f"{command} {label} exited with status {exit_code}",
                command=label,
                exit_code=exit_code,
            )

        return b"".join(chunks)
