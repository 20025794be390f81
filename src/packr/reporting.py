"""Console rendering for build results."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import Artifact, LintSummary


def print_lint_summary(summary: LintSummary, console: Console) -> None:
    """Print warnings grouped by file followed by totals. Prints nothing for an empty summary."""

    if not summary:
        return

    console.print("\n[bold yellow]ESLint Warning Summary:[/bold yellow]")
    console.print("=====================")
    for file, warnings in summary:
        console.print(f"\nFile: {escape(file)}")
        console.print("Warnings:")
        for warning in warnings:
            console.print(f"  {escape(warning)}")
    console.print(f"\nTotal files with warnings: {summary.file_count}")
    console.print(f"Total warnings: {summary.total}")


def artifact_table(artifacts: Iterable[Artifact], root: Path | None = None) -> Table:
    table = Table(title="Build Summary")
    table.add_column("Artifact")
    table.add_column("Path")
    table.add_column("Bytes", justify="right")
    for artifact in artifacts:
        path = artifact.path
        shown = path.relative_to(root) if root and path.is_relative_to(root) else path
        size = str(path.stat().st_size) if path.exists() else "-"
        table.add_row(artifact.label, escape(str(shown)), size)
    return table


__all__ = ["print_lint_summary", "artifact_table"]
