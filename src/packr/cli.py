"""Typer-based CLI for packr."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from .config import example_config, load_env_files, resolve_config_path, save_config
from .errors import PackrError
from .pipeline import StageFailure, clean, run_build

app = typer.Typer(help="Compile SCSS and bundle JavaScript as described by a packr JSON config.")
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

CONFIG_HELP = "Path to the JSON config, or a directory containing .packr.json"


def _console_sink(message) -> None:
    console.print(str(message).rstrip("\n"), markup=False, highlight=False)


def _configure_logging(level: str, log_file: Path | None) -> None:
    logger.remove()
    logger.add(_console_sink, level=level, format="{message}")
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level)


def _fail(message: str) -> None:
    err_console.print(f"[red]❌ {escape(message)}[/red]")
    raise typer.Exit(code=1)


def _build(
    config: Optional[Path],
    watch: bool,
    log_level: str,
    log_file: Optional[Path],
    env: bool,
) -> None:
    _configure_logging(log_level.upper(), log_file)
    if env:
        try:
            load_env_files(Path.cwd())
        except PackrError as exc:
            _fail(f"Failed to load environment: {exc}")
    config_path = resolve_config_path(config)
    try:
        run_build(config_path, watch=watch)
    except StageFailure as failure:
        _fail(str(failure))
    mode = "watch" if watch else "single"
    console.print(f"[green]✅ Build ({mode}) complete.[/green]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
    watch: bool = typer.Option(False, "--watch", help="Keep esbuild running and rebuild on change"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    env: bool = typer.Option(True, "--env/--no-env", help="Load .env files from the working directory"),
) -> None:
    """Build when no sub-command is given."""

    if ctx.invoked_subcommand is None:
        _build(config, watch, log_level, log_file, env)


@app.command()
def build(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
    watch: bool = typer.Option(False, "--watch", help="Keep esbuild running and rebuild on change"),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file"),
    env: bool = typer.Option(True, "--env/--no-env"),
) -> None:
    """Compile styles, then bundle scripts."""

    # Options given before the sub-command land on the callback.
    parent = ctx.parent.params if ctx.parent is not None else {}
    _build(
        config or parent.get("config"),
        watch or parent.get("watch", False),
        log_level or parent.get("log_level") or "INFO",
        log_file or parent.get("log_file"),
        env and parent.get("env", True),
    )


@app.command("clean")
def clean_command(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
    log_level: str = typer.Option("INFO", "--log-level"),
) -> None:
    """Remove the files a build produces, including destination copies."""

    _configure_logging(log_level.upper(), None)
    parent = ctx.parent.params if ctx.parent is not None else {}
    try:
        removed = clean(resolve_config_path(config or parent.get("config")))
    except PackrError as exc:
        _fail(f"Clean failed: {exc}")
    console.print(f"[green]Removed {len(removed)} file(s).[/green]")


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path(".packr.json"), resolve_path=True),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write an example configuration file to PATH."""

    if path.exists() and not force:
        _fail(f"{path} already exists (use --force to overwrite)")
    save_config(example_config(), path)
    console.print(f"[green]Wrote configuration to {escape(str(path))}[/green]")


if __name__ == "__main__":
    app()
