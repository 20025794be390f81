"""Subprocess capability used for the linter and bundler."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from loguru import logger


@dataclass(slots=True)
class ProcessResult:
    """Exit code and, when captured, decoded output of a finished process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""


class ProcessRunner(Protocol):
    """Run ``command`` to completion.

    Raises ``OSError`` when the process cannot be started.
    """

    def run(
        self, command: Sequence[str], *, capture: bool = False, cwd: Optional[Path] = None
    ) -> ProcessResult:
        ...


class SubprocessRunner:
    """``ProcessRunner`` backed by :func:`subprocess.run`.

    Uncaptured runs inherit the terminal so the tool's own output (and
    esbuild's watch loop) streams straight through.
    """

    def run(
        self, command: Sequence[str], *, capture: bool = False, cwd: Optional[Path] = None
    ) -> ProcessResult:
        logger.debug("Running {}", " ".join(command))
        completed = subprocess.run(
            list(command),
            cwd=cwd,
            capture_output=capture,
            text=capture,
            encoding="utf-8" if capture else None,
            errors="replace" if capture else None,
            check=False,
        )
        return ProcessResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


__all__ = ["ProcessResult", "ProcessRunner", "SubprocessRunner"]
