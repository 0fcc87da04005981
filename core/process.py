"""Running external commands."""

import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from .console import StatusLog
from .errors import CommandError

Command = str | Sequence[str]


def format_command(command: Command) -> str:
    if isinstance(command, str):
        return command
    return shlex.join(command)


class ProcessRunner:
    """Run commands in the project directory.

    String commands go through the shell so user supplied test commands
    behave as typed; argument lists are executed directly.
    """

    def __init__(self, cwd: Path | None = None, log: StatusLog | None = None):
        self.cwd = cwd
        self.log = log or StatusLog()

    def system(self, command: Command) -> bool:
        """Echo and run a command, returning True on a zero exit status."""
        self.log.log_cmd(format_command(command))
        try:
            completed = subprocess.run(
                command,
                cwd=self.cwd,
                shell=isinstance(command, str),
                check=False,
            )
        except OSError as e:
            self.log.log_indent(f"Could not start command: {e}")
            return False
        return completed.returncode == 0

    def capture(self, command: Command) -> str:
        """Run a command and return its standard output.

        Raises:
            CommandError: If the command cannot be started or exits non-zero
        """
        try:
            completed = subprocess.run(
                command,
                cwd=self.cwd,
                shell=isinstance(command, str),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise CommandError(format_command(command), -1, str(e)) from e

        if completed.returncode != 0:
            raise CommandError(
                format_command(command), completed.returncode, completed.stderr
            )
        return completed.stdout
