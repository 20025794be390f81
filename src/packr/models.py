"""Shared records describing build results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(slots=True)
class LintSummary:
    """Warnings collected from one lint run, keyed by file path in report order."""

    warnings: Dict[str, List[str]] = field(default_factory=dict)

    def add_warning(self, file: str, warning: str) -> None:
        self.warnings.setdefault(file, []).append(warning)

    def __iter__(self) -> Iterator[Tuple[str, List[str]]]:
        return iter(self.warnings.items())

    def __bool__(self) -> bool:
        return bool(self.warnings)

    @property
    def file_count(self) -> int:
        return len(self.warnings)

    @property
    def total(self) -> int:
        return sum(len(items) for items in self.warnings.values())


@dataclass(slots=True)
class Artifact:
    """A file produced or copied by a build step."""

    label: str
    path: Path


@dataclass(slots=True)
class StepArtifacts:
    """Files written by one build step, in the order they were produced."""

    output: Path
    minified: Optional[Path] = None
    sourcemaps: List[Path] = field(default_factory=list)
    copies: List[Path] = field(default_factory=list)

    def artifacts(self, kind: str) -> List[Artifact]:
        items = [Artifact(kind, self.output)]
        if self.minified is not None:
            items.append(Artifact(f"{kind} (minified)", self.minified))
        items.extend(Artifact("Sourcemap", path) for path in self.sourcemaps)
        items.extend(Artifact(f"{kind} (copy)", path) for path in self.copies)
        return items


@dataclass(slots=True)
class ScriptBuildResult:
    """Outcome of the script step: written files plus the lint summary."""

    artifacts: StepArtifacts
    lint: LintSummary = field(default_factory=LintSummary)


@dataclass(slots=True)
class BuildReport:
    """Everything a full build produced."""

    config_path: Path
    styles: StepArtifacts
    scripts: ScriptBuildResult
    watch: bool = False

    def artifacts(self) -> List[Artifact]:
        return self.styles.artifacts("CSS") + self.scripts.artifacts.artifacts("JavaScript")


__all__ = [
    "LintSummary",
    "Artifact",
    "StepArtifacts",
    "ScriptBuildResult",
    "BuildReport",
]
