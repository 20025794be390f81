"""JavaScript bundling through the esbuild CLI."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from loguru import logger

from .config import PackrConfig
from .errors import BundleError, BundleSpawnError, InputNotFound
from .lint import run_eslint
from .models import ScriptBuildResult, StepArtifacts
from .output import copy_to_destination, log_artifact
from .paths import OutputPaths, resolve_path
from .process import ProcessRunner, SubprocessRunner

BUNDLER = "esbuild"
MINIFY_FLAGS = ("--minify", "--minify-syntax", "--minify-whitespace")


def bundle_command(
    config: PackrConfig,
    input_path: Path,
    output: Path,
    *,
    minify: bool = False,
    watch: bool = False,
) -> List[str]:
    """Argument vector for one esbuild run."""

    command = [BUNDLER, str(input_path), "--bundle"]
    if minify:
        command.extend(MINIFY_FLAGS)
    command.extend(
        [
            f"--target={config.target}",
            f"--outfile={output}",
            "--legal-comments=none",
            f"--format={config.format}",
        ]
    )
    if config.sourcemap:
        command.append("--sourcemap")
    if watch:
        command.append("--watch")
    return command


def _bundle(runner: ProcessRunner, command: List[str], cwd: Path, what: str) -> None:
    try:
        result = runner.run(command, cwd=cwd)
    except OSError as exc:
        raise BundleSpawnError(exc, context=f"Failed to run {what}") from exc
    if result.returncode != 0:
        details = result.stderr.strip() or f"exit code {result.returncode}"
        raise BundleError(details, context=f"{what} failed")


def build_scripts(
    config: PackrConfig,
    config_dir: Path,
    *,
    watch: bool = False,
    runner: Optional[ProcessRunner] = None,
) -> ScriptBuildResult:
    """Lint (when enabled) and bundle the configured JavaScript entry.

    In watch mode the first esbuild run does not return until the bundler is
    stopped. The minified run never watches.
    """

    runner = runner or SubprocessRunner()
    logger.info("Building scripts from: {}", config.js_input)
    input_path = resolve_path(config_dir, config.js_input)
    if not input_path.exists():
        raise InputNotFound(input_path.resolve(), kind="JavaScript")

    summary = run_eslint(config, config_dir, input_path, runner)

    paths = OutputPaths(
        config_dir, config.js_output, kind="js", destination=config.js_destination
    )
    if config.verbose:
        logger.info("Running esbuild with format: {}", config.format)
    _bundle(runner, bundle_command(config, input_path, paths.output, watch=watch), config_dir, "esbuild")

    artifacts = StepArtifacts(output=paths.output)
    log_artifact(config, "JavaScript written to: {}", paths.output)
    if config.sourcemap and paths.sourcemap.exists():
        artifacts.sourcemaps.append(paths.sourcemap)

    if config.minify:
        _bundle(
            runner,
            bundle_command(config, input_path, paths.minified, minify=True),
            config_dir,
            "esbuild minification",
        )
        artifacts.minified = paths.minified
        log_artifact(config, "JavaScript minified version written to: {}", paths.minified)
        if config.sourcemap and paths.minified_sourcemap.exists():
            artifacts.sourcemaps.append(paths.minified_sourcemap)

    copy_to_destination(paths, artifacts, config, "JS")
    logger.success("Scripts built successfully")
    return ScriptBuildResult(artifacts=artifacts, lint=summary)


__all__ = ["BUNDLER", "bundle_command", "build_scripts"]
