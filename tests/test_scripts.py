from __future__ import annotations

import json
from pathlib import Path

import pytest

from packr.config import load_config
from packr.errors import BundleError, BundleSpawnError, InputNotFound
from packr.process import ProcessResult
from packr.scripts import build_scripts, bundle_command

from .conftest import FakeRunner


def test_bundle_command_vector(write_config, project: Path) -> None:
    config, config_dir = load_config(write_config(sourcemap=True, format="esm", target="es2018"))
    command = bundle_command(config, Path("in.js"), Path("out.js"), watch=True)
    assert command == [
        "esbuild",
        "in.js",
        "--bundle",
        "--target=es2018",
        "--outfile=out.js",
        "--legal-comments=none",
        "--format=esm",
        "--sourcemap",
        "--watch",
    ]


def test_minified_run_never_watches(write_config, project: Path, fake_runner: FakeRunner) -> None:
    config, config_dir = load_config(write_config())
    build_scripts(config, config_dir, watch=True, runner=fake_runner)

    first, second = fake_runner.calls
    assert first[-1] == "--watch"
    assert "--watch" not in second
    assert second[:6] == [
        "esbuild",
        str(project / "src" / "app.js"),
        "--bundle",
        "--minify",
        "--minify-syntax",
        "--minify-whitespace",
    ]
    assert f"--outfile={project / 'dist' / 'app.min.js'}" in second


def test_minify_disabled_runs_bundler_once(write_config, project: Path, fake_runner: FakeRunner) -> None:
    config, config_dir = load_config(write_config(minify=False))
    result = build_scripts(config, config_dir, runner=fake_runner)

    assert len(fake_runner.calls) == 1
    assert result.artifacts.minified is None
    assert (project / "dist" / "app.js").exists()
    assert not (project / "dist" / "app.min.js").exists()


def test_bundler_failure(write_config) -> None:
    config, config_dir = load_config(write_config())
    runner = FakeRunner({"esbuild": ProcessResult(returncode=1, stderr="Could not resolve './x'")})
    with pytest.raises(BundleError) as info:
        build_scripts(config, config_dir, runner=runner)
    assert "Could not resolve" in str(info.value)
    assert len(runner.calls) == 1


def test_bundler_spawn_failure(write_config) -> None:
    config, config_dir = load_config(write_config())
    runner = FakeRunner(errors={"esbuild": FileNotFoundError("esbuild")})
    with pytest.raises(BundleSpawnError):
        build_scripts(config, config_dir, runner=runner)


def test_missing_input(write_config, fake_runner: FakeRunner) -> None:
    config, config_dir = load_config(write_config(js_input="src/none.js"))
    with pytest.raises(InputNotFound):
        build_scripts(config, config_dir, runner=fake_runner)
    assert fake_runner.calls == []


def test_destination_copies_bundles_and_maps(write_config, project: Path, fake_runner: FakeRunner) -> None:
    config, config_dir = load_config(write_config(js_destination="public/js", sourcemap=True))
    result = build_scripts(config, config_dir, runner=fake_runner)

    dest = project / "public" / "js"
    for name in ("app.js", "app.min.js", "app.js.map", "app.min.js.map"):
        assert (dest / name).exists(), name
    assert result.artifacts.sourcemaps == [
        project / "dist" / "app.js.map",
        project / "dist" / "app.min.js.map",
    ]


def test_destination_without_minify(write_config, project: Path, fake_runner: FakeRunner) -> None:
    config, config_dir = load_config(write_config(js_destination="public/js", minify=False))
    build_scripts(config, config_dir, runner=fake_runner)

    dest = project / "public" / "js"
    assert (dest / "app.js").exists()
    assert not (dest / "app.min.js").exists()


def test_lint_summary_is_returned(write_config, project: Path) -> None:
    (project / ".eslintrc.json").write_text("{}")
    report = [
        {
            "filePath": "app.js",
            "messages": [{"ruleId": "no-var", "message": "Unexpected var.", "line": 1, "column": 1}],
        }
    ]
    runner = FakeRunner(
        {
            "eslint": ProcessResult(
                returncode=1, stdout=json.dumps(report), stderr="ESLint found too many warnings"
            )
        }
    )
    config, config_dir = load_config(write_config(eslint=True))
    result = build_scripts(config, config_dir, runner=runner)

    assert result.lint.warnings == {"app.js": ["Line 1, Column 1: no-var - Unexpected var."]}
    assert runner.calls[0][:2] == ["npx", "eslint"]
    assert runner.calls[1][0] == "esbuild"
