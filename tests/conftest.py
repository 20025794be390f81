from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

from packr.process import ProcessResult


class FakeRunner:
    """Records every command; esbuild runs write their ``--outfile`` (and map) like the real tool."""

    def __init__(
        self,
        results: Optional[Dict[str, ProcessResult]] = None,
        errors: Optional[Dict[str, OSError]] = None,
    ) -> None:
        self.results = dict(results or {})
        self.errors = dict(errors or {})
        self.calls: List[List[str]] = []

    @staticmethod
    def _tool(command: Sequence[str]) -> str:
        return "eslint" if "eslint" in command else command[0]

    def run(self, command: Sequence[str], *, capture: bool = False, cwd: Optional[Path] = None) -> ProcessResult:
        self.calls.append(list(command))
        tool = self._tool(command)
        if tool in self.errors:
            raise self.errors[tool]
        result = self.results.get(tool, ProcessResult(returncode=0))
        if tool == "esbuild" and result.returncode == 0:
            for arg in command:
                if arg.startswith("--outfile="):
                    outfile = Path(arg.split("=", 1)[1])
                    outfile.parent.mkdir(parents=True, exist_ok=True)
                    outfile.write_text("(()=>{console.log(1);})();\n")
                    if "--sourcemap" in command:
                        Path(f"{outfile}.map").write_text('{"version":3}')
        return result


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    saved = dict(os.environ)
    for name in list(os.environ):
        if name.startswith("PACKR_") or name == "NODE_ENV":
            monkeypatch.delenv(name)
    yield
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.scss").write_text("$main: red;\nbody { color: $main; }\n")
    (root / "src" / "app.js").write_text("console.log(1)\n")
    return root


@pytest.fixture()
def write_config(project: Path):
    def _factory(**overrides: Any) -> Path:
        data: Dict[str, Any] = {
            "scss_input": "src/app.scss",
            "scss_output": "dist/app.css",
            "js_input": "src/app.js",
            "js_output": "dist/app.js",
        }
        data.update(overrides)
        path = project / ".packr.json"
        path.write_text(json.dumps(data))
        return path

    return _factory
