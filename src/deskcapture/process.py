"""External command execution.

Backends never call :mod:`subprocess` directly. They describe the command
they need as a :class:`Command` and hand it to a :data:`CommandRunner`, a
plain callable returning captured stdout. The default runner spawns a real
process; tests inject a fake one.
"""

import os
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import psutil

from .capture_exceptions import CommandError
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Command:
    """Description of one external command invocation.

    Attributes:
        args: Executable followed by its arguments
        env: Extra environment variables layered over the current environment
    """

    args: tuple[str, ...]
    env: Mapping[str, str] | None = field(default=None, compare=False)

    @property
    def program(self) -> str:
        """Name of the executable."""
        return self.args[0]


CommandRunner = Callable[[Command], bytes]


class SubprocessRunner:
    """Run commands with :func:`subprocess.run` and return their stdout.

    Each process is waited for (and reaped) before the call returns.
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the runner.

        Args:
            timeout: Optional upper bound in seconds for each command
        """
        self.timeout = timeout

    def __call__(self, command: Command) -> bytes:
        """Run a command.

        Args:
            command: Command to run

        Returns:
            Captured stdout bytes

        Raises:
            CommandError: If the executable is missing, the command times out
                or exits with a non-zero status
        """
        env = None
        if command.env:
            env = {**os.environ, **command.env}

        logger.debug("command_started", program=command.program, argc=len(command.args))

        try:
            result = subprocess.run(
                list(command.args),
                capture_output=True,
                env=env,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(command.program, "executable not found") from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(command.program, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise CommandError(command.program, str(e)) from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise CommandError(
                command.program,
                f"exited with status {result.returncode}" + (f": {stderr}" if stderr else ""),
                returncode=result.returncode,
                stderr=stderr,
            )

        logger.debug("command_completed", program=command.program, output_bytes=len(result.stdout))
        return result.stdout


def run_text(runner: CommandRunner, *args: str, env: Mapping[str, str] | None = None) -> str:
    """Run a command and decode its stdout as UTF-8.

    Args:
        runner: Command runner
        *args: Executable and arguments
        env: Optional extra environment variables

    Returns:
        Decoded stdout
    """
    return runner(Command(args=tuple(args), env=env)).decode("utf-8", errors="replace")


def process_name_for_pid(pid: int) -> str | None:
    """Look up a process name, None if the process is gone or inaccessible."""
    try:
        return str(psutil.Process(pid).name())
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return None
