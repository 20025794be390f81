"""Error hierarchy for packr."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .models import LintSummary


class PackrError(Exception):
    """Base class for every failure raised by packr.

    Each error carries a short context label and, when available, the
    underlying cause rendered as text. ``str(error)`` yields
    ``"<context>: <details>"``.
    """

    context = "Build failed"

    def __init__(self, details: object | None = None, *, context: str | None = None) -> None:
        if context is not None:
            self.context = context
        self.details = str(details) if details is not None else "Unknown error"
        super().__init__(f"{self.context}: {self.details}")


class ConfigError(PackrError):
    """Raised when a configuration file cannot be loaded."""

    context = "Invalid configuration"


class ConfigReadError(ConfigError):
    context = "Failed to read config file"


class ConfigParseError(ConfigError):
    context = "Failed to parse config file"


class ConfigDirectoryError(ConfigError):
    context = "Failed to get config directory"


class MissingEnvironmentError(ConfigError):
    context = "Missing required environment variables"


class InsecureEnvironmentError(ConfigError):
    context = "Insecure environment"


class BuildError(PackrError):
    """Raised when a build step fails."""


class InputNotFound(BuildError):
    context = "Input file not found"

    def __init__(self, path: Path, *, kind: str = "Input") -> None:
        self.path = path
        super().__init__(path, context=f"{kind} input file not found")


class ScssCompileError(BuildError):
    context = "SCSS compilation failed"


class CssParseError(BuildError):
    context = "CSS parsing failed"


class OutputDirError(BuildError):
    context = "Failed to create output directory"


class CssWriteError(BuildError):
    context = "Failed to write CSS"


class CopyError(BuildError):
    context = "Failed to copy to destination"


class InvalidLintConfigPath(BuildError):
    context = "Invalid ESLint config path"


class LintConfigNotFound(BuildError):
    context = "Failed to resolve ESLint config path"


class LintConfigOutsideAllowedDirectory(BuildError):
    context = "ESLint config path points outside the allowed config directory"


class LintSpawnError(BuildError):
    context = "Failed to run ESLint"


class LintFailed(BuildError):
    """ESLint reported errors (exit code 1 without the warning-limit notice)."""

    context = "ESLint found errors"

    def __init__(self, stderr: str, summary: "LintSummary | None" = None) -> None:
        self.stderr = stderr
        self.summary = summary
        super().__init__(f"\n{stderr}" if stderr else None)


class BundleSpawnError(BuildError):
    context = "Failed to run esbuild"


class BundleError(BuildError):
    context = "esbuild failed"


class UnsafePathError(BuildError):
    context = "Unsafe path blocked"


__all__ = [
    "PackrError",
    "ConfigError",
    "ConfigReadError",
    "ConfigParseError",
    "ConfigDirectoryError",
    "MissingEnvironmentError",
    "InsecureEnvironmentError",
    "BuildError",
    "InputNotFound",
    "ScssCompileError",
    "CssParseError",
    "OutputDirError",
    "CssWriteError",
    "CopyError",
    "InvalidLintConfigPath",
    "LintConfigNotFound",
    "LintConfigOutsideAllowedDirectory",
    "LintSpawnError",
    "LintFailed",
    "BundleSpawnError",
    "BundleError",
    "UnsafePathError",
]
