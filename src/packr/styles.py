"""SCSS compilation.

``libsass`` compiles the entry file, then compiles the resulting CSS a second
time as a plain stylesheet. That second pass validates the CSS and
normalizes it into the expanded form written to the output; ``rcssmin``
prints the minified sibling from the same stylesheet.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import rcssmin
import sass
from loguru import logger

from .config import PackrConfig
from .errors import (
    CssParseError,
    CssWriteError,
    InputNotFound,
    OutputDirError,
    ScssCompileError,
)
from .models import StepArtifacts
from .output import copy_to_destination, log_artifact
from .paths import OutputPaths, resolve_path


@dataclass(slots=True)
class Stylesheet:
    """Parsed CSS ready to be printed."""

    code: str

    def to_css(self, *, minify: bool = False) -> str:
        if minify:
            return rcssmin.cssmin(self.code)
        return self.code


def compile_scss(input_path: Path) -> str:
    try:
        return sass.compile(
            filename=str(input_path),
            include_paths=[str(input_path.parent)],
            output_style="expanded",
        )
    except (sass.CompileError, OSError) as exc:
        raise ScssCompileError(exc) from exc


def parse_stylesheet(css: str) -> Stylesheet:
    if not css.strip():
        return Stylesheet(code="")
    try:
        normalized = sass.compile(string=css, output_style="expanded")
    except sass.CompileError as exc:
        raise CssParseError(exc) from exc
    return Stylesheet(code=normalized)


def sourcemap_stub(output: Path, source: Path) -> str:
    """Placeholder sourcemap naming ``output`` and its single ``source``; no real mappings."""

    return json.dumps(
        {
            "version": 3,
            "file": output.name,
            "sources": [source.name],
            "names": [],
            "mappings": "",
        },
        separators=(",", ":"),
        ensure_ascii=False,
    )


def _write(path: Path, content: str, what: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise CssWriteError(exc, context=f"Failed to write {what}") from exc


def build_styles(config: PackrConfig, config_dir: Path) -> StepArtifacts:
    """Compile the configured SCSS entry into CSS, its minified sibling and sourcemap stubs."""

    logger.info("Building styles from: {}", config.scss_input)
    input_path = resolve_path(config_dir, config.scss_input)
    if not input_path.exists():
        raise InputNotFound(input_path.resolve(), kind="SCSS")

    paths = OutputPaths(
        config_dir, config.scss_output, kind="css", destination=config.css_destination
    )
    css = compile_scss(input_path)
    sheet = parse_stylesheet(css)

    try:
        paths.output.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputDirError(exc) from exc

    artifacts = StepArtifacts(output=paths.output)
    _write(paths.output, sheet.to_css(), "CSS")
    log_artifact(config, "CSS written to: {}", paths.output)

    if config.sourcemap:
        _write(paths.sourcemap, sourcemap_stub(paths.output, input_path), "CSS sourcemap")
        artifacts.sourcemaps.append(paths.sourcemap)
        log_artifact(config, "CSS sourcemap written to: {}", paths.sourcemap)

    if config.minify:
        _write(paths.minified, sheet.to_css(minify=True), "minified CSS")
        artifacts.minified = paths.minified
        log_artifact(config, "CSS minified version written to: {}", paths.minified)
        if config.sourcemap:
            _write(
                paths.minified_sourcemap,
                sourcemap_stub(paths.minified, input_path),
                "minified CSS sourcemap",
            )
            artifacts.sourcemaps.append(paths.minified_sourcemap)
            log_artifact(config, "CSS minified sourcemap written to: {}", paths.minified_sourcemap)

    copy_to_destination(paths, artifacts, config, "CSS")
    logger.success("Styles built successfully")
    return artifacts


__all__ = [
    "Stylesheet",
    "compile_scss",
    "parse_stylesheet",
    "sourcemap_stub",
    "build_styles",
]
