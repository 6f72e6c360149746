"""Exception hierarchy for mern-gen.

Every failure the tool reports to the user is a ``ScaffoldError``.  The CLI
entry point translates each subclass to a process exit code via
``exit_code``; nothing below ``main`` catches these.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""

    exit_code: int = 1


class UsageError(ScaffoldError):
    """Raised when the command line is missing a required argument."""


class CollisionError(ScaffoldError):
    """Raised when the target project directory already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Folder already exists: {path}")


class SubprocessError(ScaffoldError):
    """Raised when an external command exits non-zero or cannot be started.

    Attributes:
        command: The argument list that was executed.
        cwd: Working directory the command ran in.
        returncode: Exit status of the process (``-1`` if it never started).
    """

    def __init__(
        self,
        command: list[str],
        cwd: Path,
        returncode: int,
        message: str | None = None,
    ) -> None:
        self.command = command
        self.cwd = cwd
        self.returncode = returncode
        detail = message or f"exited with status {returncode}"
        super().__init__(f"Command failed ({' '.join(command)}) in {cwd}: {detail}")

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return self.returncode if self.returncode > 0 else 1


class ManifestError(ScaffoldError):
    """Raised when ``package.json`` is missing or is not a JSON object."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot update manifest {path}: {reason}")
