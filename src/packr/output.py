"""Helpers shared by the build steps for reporting and copying their outputs."""

from __future__ import annotations

import shutil

from loguru import logger

from .config import PackrConfig
from .errors import CopyError
from .models import StepArtifacts
from .paths import OutputPaths


def log_artifact(config: PackrConfig, message: str, *args: object) -> None:
    """Log an artifact line; only visible at the default level when ``verbose`` is set."""

    logger.log("INFO" if config.verbose else "DEBUG", message, *args)


def copy_to_destination(
    paths: OutputPaths, artifacts: StepArtifacts, config: PackrConfig, label: str
) -> None:
    """Copy the step's output, plus the minified file and sourcemaps that exist, into ``paths.dest_dir``."""

    if paths.dest_dir is None:
        return
    try:
        paths.dest_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CopyError(exc, context=f"Failed to create {label} destination folder") from exc

    sources = [artifacts.output]
    if artifacts.minified is not None:
        sources.append(artifacts.minified)
    sources.extend(artifacts.sourcemaps)

    for source in sources:
        if source != artifacts.output and not source.exists():
            continue
        target = paths.at_destination(source)
        if target.resolve() == source.resolve():
            logger.debug("{} already in destination: {}", label, target)
            continue
        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            raise CopyError(exc, context=f"Failed to copy {source.name} to destination") from exc
        artifacts.copies.append(target)
        log_artifact(config, "{} copied to: {}", label, target)


__all__ = ["log_artifact", "copy_to_destination"]
