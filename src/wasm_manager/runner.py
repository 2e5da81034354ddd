"""External process execution."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of an external command."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True if the command exited cleanly."""
        return self.returncode == 0


@runtime_checkable
class CommandRunner(Protocol):
    """Interface for running executables found on PATH."""

    def run(self, argv: Sequence[str], *, capture: bool = False) -> CommandResult:
        """Run a command to completion.

        Args:
            argv: Executable name followed by its arguments.
            capture: Capture stdout/stderr instead of inheriting the terminal.

        Returns:
            CommandResult for the finished process.

        Raises:
            OSError: If the executable cannot be started.

        """
        ...

    def which(self, name: str) -> str | None:
        """Look up an executable on PATH without running it."""
        ...


class SubprocessRunner:
    """Runs commands with blocking ``subprocess.run`` calls."""

    def run(self, argv: Sequence[str], *, capture: bool = False) -> CommandResult:
        """Run a command without a shell and without a timeout.

        Output that is not valid UTF-8 is decoded with replacement characters.

        """
        completed = subprocess.run(
            list(argv),
            capture_output=capture,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        return CommandResult(
            argv=tuple(argv),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def which(self, name: str) -> str | None:
        return shutil.which(name)
