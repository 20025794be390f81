"""High level build routines."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich.console import Console

from .config import ensure_paths_inside, load_config, resolve_config_path
from .errors import PackrError, UnsafePathError
from .models import BuildReport
from .paths import OutputPaths, is_inside
from .process import ProcessRunner
from .reporting import artifact_table, print_lint_summary
from .scripts import build_scripts
from .styles import build_styles

console = Console(soft_wrap=True)


class StageFailure(Exception):
    """Raised when one stage of the pipeline fails."""

    LABELS = {
        "config": "Failed to load configuration",
        "styles": "Styles failed",
        "scripts": "Scripts failed",
    }

    def __init__(self, stage: str, error: PackrError) -> None:
        super().__init__(f"{self.LABELS[stage]}: {error}")
        self.stage = stage
        self.error = error


def run_build(
    config_path: Path,
    *,
    watch: bool = False,
    runner: Optional[ProcessRunner] = None,
    show_summary: bool = True,
    root: Optional[Path] = None,
) -> BuildReport:
    """Load the configuration, then build styles and scripts in that order.

    When ``root`` is given, every configured path must resolve inside it.
    """

    try:
        config, config_dir = load_config(config_path)
        if root is not None:
            ensure_paths_inside(config, config_dir, root)
    except PackrError as exc:
        raise StageFailure("config", exc) from exc

    try:
        styles = build_styles(config, config_dir)
    except PackrError as exc:
        raise StageFailure("styles", exc) from exc

    try:
        scripts = build_scripts(config, config_dir, watch=watch, runner=runner)
    except PackrError as exc:
        lint_summary = getattr(exc, "summary", None)
        if lint_summary:
            print_lint_summary(lint_summary, console)
        raise StageFailure("scripts", exc) from exc

    print_lint_summary(scripts.lint, console)
    report = BuildReport(config_path=config_path, styles=styles, scripts=scripts, watch=watch)
    if show_summary:
        console.print(artifact_table(report.artifacts(), root=config_dir))
    return report


def packr(config_path: Path | str | None = None, *, watch: bool = False) -> BuildReport:
    """Build from ``config_path`` (a file or a directory holding ``.packr.json``).

    Paths in the configuration must stay inside the working directory.
    """

    path = resolve_config_path(Path(config_path) if config_path is not None else None)
    return run_build(path, watch=watch, root=Path.cwd())


def watch(config_path: Path | str | None = None) -> BuildReport:
    """Build with esbuild watching the scripts; blocks until the bundler exits."""

    return packr(config_path, watch=True)


def clean(config_path: Path) -> List[Path]:
    """Delete every artifact the configuration can produce; returns the removed paths."""

    config, config_dir = load_config(config_path)
    root = config_dir.resolve()
    candidates = OutputPaths(
        config_dir, config.scss_output, kind="css", destination=config.css_destination
    ).all() + OutputPaths(
        config_dir, config.js_output, kind="js", destination=config.js_destination
    ).all()

    sources = {(config_dir / config.scss_input).resolve(), (config_dir / config.js_input).resolve()}
    targets = [
        path for path in dict.fromkeys(candidates) if path.is_file() and path.resolve() not in sources
    ]
    for path in targets:
        if not is_inside(path.resolve(), root):
            raise UnsafePathError(path.resolve())

    removed: List[Path] = []
    for path in targets:
        path.unlink()
        removed.append(path)
        logger.info("Removed {}", path)
    return removed


__all__ = ["StageFailure", "run_build", "packr", "watch", "clean"]
