"""ESLint integration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

from loguru import logger

from .config import DEFAULT_LINT_CONFIG_NAME, PackrConfig
from .errors import (
    InvalidLintConfigPath,
    LintConfigNotFound,
    LintConfigOutsideAllowedDirectory,
    LintFailed,
    LintSpawnError,
)
from .models import LintSummary
from .paths import has_parent_segment, is_inside
from .process import ProcessRunner

LINT_COMMAND = ("npx", "eslint")
TOO_MANY_WARNINGS = "too many warnings"


def resolve_lint_config(config: PackrConfig, config_dir: Path) -> Path:
    """Return the canonical ESLint config path, refusing anything outside ``config_dir``."""

    custom = config.eslint_config
    if custom is not None:
        if has_parent_segment(custom) or Path(custom).is_absolute():
            raise InvalidLintConfigPath(f"'{custom}' is a potential traversal attempt")
        candidate = config_dir / custom
    else:
        candidate = config_dir / DEFAULT_LINT_CONFIG_NAME

    try:
        resolved = candidate.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise LintConfigNotFound(exc) from exc

    if not is_inside(resolved, config_dir.resolve()):
        raise LintConfigOutsideAllowedDirectory(resolved)
    return resolved


def lint_command(lint_config: Path, input_path: Path) -> List[str]:
    return [
        *LINT_COMMAND,
        "--max-warnings=0",
        "--format=json",
        "--no-eslintrc",
        "-c",
        str(lint_config),
        str(input_path),
    ]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_lint_report(stdout: str, summary: LintSummary) -> None:
    """Add every complete diagnostic in ESLint's JSON report to ``summary``."""

    if not stdout.strip():
        return
    try:
        report = json.loads(stdout)
    except json.JSONDecodeError:
        logger.debug("ESLint output was not JSON; skipping diagnostics")
        return
    if not isinstance(report, list):
        return

    for entry in report:
        if not isinstance(entry, dict):
            continue
        file_path = entry.get("filePath")
        messages = entry.get("messages")
        if not isinstance(file_path, str) or not isinstance(messages, list):
            continue
        for message in messages:
            if not isinstance(message, dict):
                continue
            rule_id = message.get("ruleId")
            text = message.get("message")
            line = message.get("line")
            column = message.get("column")
            if not (isinstance(rule_id, str) and isinstance(text, str) and _is_int(line) and _is_int(column)):
                continue
            summary.add_warning(file_path, f"Line {line}, Column {column}: {rule_id} - {text}")


def run_eslint(
    config: PackrConfig, config_dir: Path, input_path: Path, runner: ProcessRunner
) -> LintSummary:
    """Lint ``input_path`` and return the collected warnings.

    Exit code 1 is fatal unless ESLint only complained about the warning
    limit; in that case the warnings are reported through the summary.
    """

    summary = LintSummary()
    if not config.eslint:
        return summary

    logger.info("Running ESLint")
    lint_config = resolve_lint_config(config, config_dir)
    command = lint_command(lint_config, input_path)
    if config.verbose:
        logger.info("ESLint checking JavaScript files")

    try:
        result = runner.run(command, capture=True, cwd=config_dir)
    except OSError as exc:
        raise LintSpawnError(exc) from exc

    parse_lint_report(result.stdout, summary)

    if result.returncode == 1 and TOO_MANY_WARNINGS not in result.stderr:
        logger.error("ESLint {}", result.stderr.strip())
        raise LintFailed(result.stderr, summary)

    if summary:
        logger.warning("ESLint warnings found (see summary below)")
    if config.verbose:
        logger.success("ESLint check passed")
    return summary


__all__ = [
    "LINT_COMMAND",
    "resolve_lint_config",
    "lint_command",
    "parse_lint_report",
    "run_eslint",
]
