"""Process execution backend.

External tools (lspci, sriov-manage) are run through a ``CommandRunner`` so
tests can substitute a fake implementation.
"""

import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass

from vgpuload.exceptions import CommandNotFoundError


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of an external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        """True when the command exited with status 0."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined, stripped stderr/stdout for error messages."""
        return "\n".join(
            part.strip() for part in (self.stderr, self.stdout) if part.strip()
        )


class CommandRunner(ABC):
    """Run an external command with arguments and capture its result."""

    @abstractmethod
    def run(self, args: list[str]) -> CommandResult:
        """Run a command to completion.

        Args:
            args: Executable followed by its arguments. No shell is involved.

        Returns:
            CommandResult with exit status and output. A non-zero exit is not
            raised here; callers decide whether it is fatal.

        Raises:
            CommandNotFoundError: If the executable cannot be found.
        """
        pass


class SubprocessRunner(CommandRunner):
    """CommandRunner backed by ``subprocess.run``."""

    def run(self, args: list[str]) -> CommandResult:
        if not args:
            raise ValueError("No command given")

        executable = args[0]
        if shutil.which(executable) is None:
            raise CommandNotFoundError(executable)

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandNotFoundError(executable) from e

        return CommandResult(
            args=tuple(args),
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
