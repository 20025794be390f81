"""Configuration loading and validation for packr."""

from __future__ import annotations

import json
import os
import re
import stat
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from dotenv import dotenv_values, load_dotenv
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import (
    ConfigDirectoryError,
    ConfigError,
    ConfigParseError,
    ConfigReadError,
    InsecureEnvironmentError,
    MissingEnvironmentError,
    UnsafePathError,
)
from .paths import is_inside

DEFAULT_CONFIG_NAME = ".packr.json"
FALLBACK_CONFIG_NAME = "packr.json"
DEFAULT_LINT_CONFIG_NAME = ".eslintrc.json"
PATH_FIELDS = ("scss_input", "scss_output", "js_input", "js_output", "css_destination", "js_destination")
REQUIRED_PRODUCTION_VARS = ("PACKR_SCSS_INPUT", "PACKR_SCSS_OUTPUT", "PACKR_JS_INPUT", "PACKR_JS_OUTPUT")
SENSITIVE_KEY = re.compile(r"api[_-]?key|secret|access[_-]?token|private[_-]?key|password", re.IGNORECASE)
SECRET_NAME = re.compile(r"key|token|secret|password", re.IGNORECASE)
PLACEHOLDER_VALUE = re.compile(r"example|test|dummy", re.IGNORECASE)

# Environment variable -> (config field, is boolean)
ENV_OVERRIDES: Dict[str, Tuple[str, bool]] = {
    "PACKR_SCSS_INPUT": ("scss_input", False),
    "PACKR_SCSS_OUTPUT": ("scss_output", False),
    "PACKR_JS_INPUT": ("js_input", False),
    "PACKR_JS_OUTPUT": ("js_output", False),
    "PACKR_CSS_DESTINATION": ("css_destination", False),
    "PACKR_JS_DESTINATION": ("js_destination", False),
    "PACKR_MINIFY": ("minify", True),
    "PACKR_TARGET": ("target", False),
    "PACKR_VERBOSE": ("verbose", True),
    "PACKR_SOURCEMAP": ("sourcemap", True),
    "PACKR_FORMAT": ("format", False),
    "PACKR_ESLINT": ("eslint", True),
    "PACKR_ESLINT_CONFIG": ("eslint_config", False),
}


class PackrConfig(BaseModel):
    """Build configuration. Paths are relative to the config file's directory."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    scss_input: str
    scss_output: str
    js_input: str
    js_output: str
    css_destination: Optional[str] = None
    js_destination: Optional[str] = None
    minify: bool = True
    target: str = "es2020"
    verbose: bool = False
    sourcemap: bool = False
    format: str = "iife"
    eslint: bool = False
    eslint_config: Optional[str] = None

    @field_validator("scss_input", "scss_output", "js_input", "js_output")
    @classmethod
    def _require_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("path must not be empty")
        return value


def apply_env_overrides(
    data: Dict[str, Any], environ: Mapping[str, str] | None = None
) -> Dict[str, Any]:
    """Return ``data`` with every ``PACKR_*`` variable that is set taking precedence."""

    environ = os.environ if environ is None else environ
    merged = dict(data)
    for name, (field, is_bool) in ENV_OVERRIDES.items():
        if name not in environ:
            continue
        value = environ[name]
        merged[field] = value == "true" if is_bool else value
        logger.debug("{} overrides '{}'", name, field)
    return merged


def _config_directory(path: Path) -> Path:
    raw = str(path)
    if raw in ("", ".") or path.anchor == raw:
        raise ConfigDirectoryError(f"'{raw}' has no parent directory")
    return path.absolute().parent


def load_config(path: Path | str) -> Tuple[PackrConfig, Path]:
    """Load the JSON configuration and return it with the directory that anchors its paths."""

    path = Path(path)
    logger.info("Loading config from: {}", path)
    config_dir = _config_directory(path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigReadError(exc) from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(exc) from exc
    if not isinstance(data, dict):
        raise ConfigParseError("expected a JSON object at the top level")

    try:
        config = PackrConfig.model_validate(apply_env_overrides(data))
    except ValidationError as exc:
        raise ConfigParseError(exc) from exc

    logger.debug("Config loaded: {}", config)
    return config, config_dir


def resolve_config_path(path: Path | None = None, cwd: Path | None = None) -> Path:
    """Pick the config file for ``path``: directories resolve to their ``.packr.json``."""

    cwd = cwd or Path.cwd()
    if path is None:
        default = cwd / DEFAULT_CONFIG_NAME
        fallback = cwd / FALLBACK_CONFIG_NAME
        if not default.exists() and fallback.exists():
            return fallback
        return default
    if path.is_dir():
        return path / DEFAULT_CONFIG_NAME
    return path


def ensure_paths_inside(config: PackrConfig, config_dir: Path, root: Path) -> None:
    """Refuse input, output and destination paths that resolve outside ``root``."""

    root = root.resolve()
    for field in PATH_FIELDS:
        value = getattr(config, field)
        if value is None:
            continue
        resolved = (config_dir / value).resolve()
        if not is_inside(resolved, root):
            raise UnsafePathError(f"{field} '{value}' resolves to {resolved}")


def _check_env_file(env_path: Path, production: bool) -> None:
    if production:
        mode = stat.S_IMODE(env_path.stat().st_mode)
        if mode != 0o600:
            raise InsecureEnvironmentError(
                f"{env_path} has mode {mode:o}, expected 600",
                context="Insecure permissions on environment file",
            )
    for key, value in dotenv_values(env_path).items():
        if not value or not SENSITIVE_KEY.search(key):
            continue
        if len(value) < 16 or PLACEHOLDER_VALUE.match(value):
            logger.warning("Potentially weak or test {} detected in {}", key, env_path)


def check_production_environment(environ: Mapping[str, str] | None = None) -> None:
    """Require the path variables and reject placeholder values for secret-like ``PACKR_*`` names."""

    environ = os.environ if environ is None else environ
    missing = [name for name in REQUIRED_PRODUCTION_VARS if not environ.get(name)]
    if missing:
        raise MissingEnvironmentError(", ".join(missing))
    placeholders = sorted(
        name
        for name, value in environ.items()
        if name.startswith("PACKR_") and SECRET_NAME.search(name) and PLACEHOLDER_VALUE.search(value)
    )
    if placeholders:
        raise InsecureEnvironmentError(
            ", ".join(placeholders),
            context="Production environment contains example/test values for sensitive variables",
        )


def load_env_files(base_dir: Path) -> list[Path]:
    """Load ``.env``, ``.env-<NODE_ENV>`` and, in development, ``.env-local``.

    The base file never overrides variables already set; the environment
    specific files do. ``.env-local`` leaves an existing ``PACKR_SOURCEMAP``
    untouched. With ``NODE_ENV=production`` every file must be mode 600 and
    the result must pass :func:`check_production_environment`. Returns the
    files that were loaded.
    """

    loaded: list[Path] = []

    def _load(name: str, override: bool) -> None:
        env_path = base_dir / name
        if env_path.is_file():
            _check_env_file(env_path, os.environ.get("NODE_ENV") == "production")
            load_dotenv(env_path, override=override)
            loaded.append(env_path)
            logger.debug("Loaded environment from {}", env_path)

    _load(".env", override=False)
    node_env = os.environ.get("NODE_ENV") or "development"
    _load(f".env-{node_env}", override=True)
    if node_env == "development":
        sourcemap = os.environ.get("PACKR_SOURCEMAP")
        _load(".env-local", override=True)
        if sourcemap is not None:
            os.environ["PACKR_SOURCEMAP"] = sourcemap
    if node_env == "production":
        check_production_environment()
    return loaded


def example_config() -> PackrConfig:
    return PackrConfig(
        scss_input="src/scss/app.scss",
        scss_output="dist/app.css",
        js_input="src/js/app.js",
        js_output="dist/app.js",
        css_destination="public/css",
        js_destination="public/js",
        sourcemap=True,
    )


def save_config(config: PackrConfig, path: Path) -> None:
    """Persist configuration to disk as JSON."""

    rendered = config.model_dump(exclude_none=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rendered, indent=2) + "\n", encoding="utf-8")


__all__ = [
    "PackrConfig",
    "ConfigError",
    "ENV_OVERRIDES",
    "apply_env_overrides",
    "load_config",
    "resolve_config_path",
    "ensure_paths_inside",
    "check_production_environment",
    "load_env_files",
    "example_config",
    "save_config",
]
