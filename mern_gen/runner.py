"""External process execution for the generators.

Generators never spawn processes themselves; they receive a ``CommandRunner``
and call ``run``.  ``SubprocessRunner`` is the real implementation: it blocks
(awaits) until the child exits, lets the child write straight to the
terminal, and turns a non-zero exit into ``SubprocessError``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from rich.markup import escape

from mern_gen.errors import SubprocessError
from mern_gen.utils import console, run_command


@dataclass
class CommandResult:
    """Outcome of one external command."""

    command: list[str]
    cwd: Path
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.returncode == 0


@runtime_checkable
class CommandRunner(Protocol):
    """Capability for running an external command to completion."""

    async def run(
        self,
        command: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """Run *command* in *cwd*.

        Raises:
            SubprocessError: If the command cannot be started or exits non-zero.
        """
        ...


class SubprocessRunner:
    """Runs commands as real child processes with inherited stdio.

    Args:
        capture: Capture output instead of inheriting the terminal.  Only
            useful for tests and debugging; the CLI always inherits.
        echo: Print each command before running it.
    """

    def __init__(self, capture: bool = False, echo: bool = True) -> None:
        self.capture = capture
        self.echo = echo

    async def run(
        self,
        command: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        if self.echo:
            console.print(f"  [dim]$ {escape(' '.join(command))}[/dim]", highlight=False)

        start = time.monotonic()
        try:
            returncode, stdout, stderr = await run_command(
                command, cwd=cwd, capture=self.capture, env=env
            )
        except OSError as exc:
            raise SubprocessError(command, cwd, -1, message=str(exc)) from exc

        result = CommandResult(
            command=list(command),
            cwd=Path(cwd),
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
            duration_seconds=time.monotonic() - start,
        )
        if not result.success:
            raise SubprocessError(command, cwd, returncode, message=stderr or None)
        return result
