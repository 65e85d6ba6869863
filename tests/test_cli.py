"""Tests for CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from routecheck.cli import main
from routecheck.config import ENV_VAR


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_env_engine(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.delenv(ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


def _write_cases(tmp_path: Path, cases: list[dict]) -> str:
    path = tmp_path / "routes.yaml"
    path.write_text(yaml.safe_dump({"cases": cases}))
    return str(path)


PASSING = [
    {"url": "~/products/3", "controller": "sample_app:ProductsController", "action": "show", "args": [3]},
    {"url": "~/favicon.ico", "ignored": True},
]

FAILING = PASSING + [
    {"url": "~/products/3", "controller": "sample_app:ProductsController", "action": "show", "args": [7]},
]


class TestCli:
    def test_help(self, runner: CliRunner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "routecheck" in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestRunCommand:
    def test_all_pass(self, runner: CliRunner, tmp_path: Path):
        cases = _write_cases(tmp_path, PASSING)
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "run", cases])
        assert result.exit_code == 0
        assert "results[2]" in result.output
        assert "failed: 0" in result.output

    def test_failure_exit_code(self, runner: CliRunner, tmp_path: Path):
        cases = _write_cases(tmp_path, FAILING)
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "run", cases])
        assert result.exit_code == 2
        assert "PARAMETER_MISMATCH" in result.output

    def test_json(self, runner: CliRunner, tmp_path: Path):
        cases = _write_cases(tmp_path, FAILING)
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "--json", "run", cases])
        parsed = json.loads(result.output)
        assert parsed["passed"] == 2
        assert parsed["failed"] == 1

    def test_engine_from_env_file(self, runner: CliRunner, tmp_path: Path):
        (tmp_path / ".env").write_text(f"{ENV_VAR}=sample_app:build_routes\n")
        cases = _write_cases(tmp_path, PASSING)
        result = runner.invoke(main, ["run", cases])
        assert result.exit_code == 0

    def test_engine_from_file_path(self, runner: CliRunner, tmp_path: Path):
        sample_app = Path(__file__).parent / "sample_app.py"
        cases = _write_cases(tmp_path, PASSING[1:])
        result = runner.invoke(main, ["--routes", f"{sample_app}:ROUTES", "run", cases])
        assert result.exit_code == 0

    def test_no_engine(self, runner: CliRunner, tmp_path: Path):
        cases = _write_cases(tmp_path, PASSING)
        result = runner.invoke(main, ["run", cases])
        assert result.exit_code == 1

    def test_invalid_cases(self, runner: CliRunner, tmp_path: Path):
        cases = _write_cases(tmp_path, [{"url": "~/"}])
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "run", cases])
        assert result.exit_code == 1

    def test_later_cases_still_run(self, runner: CliRunner, tmp_path: Path):
        cases = _write_cases(tmp_path, [{"url": "~/", "controller": "no_such_module:HomeController"}] + PASSING)
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "--json", "run", cases])
        assert result.exit_code == 2
        parsed = json.loads(result.output)
        assert parsed["passed"] == 2
        assert parsed["failed"] == 1

    def test_unknown_controller(self, runner: CliRunner, tmp_path: Path):
        cases = _write_cases(tmp_path, [{"url": "~/", "controller": "sample_app:Nope"}])
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "run", cases])
        assert result.exit_code == 2
        assert "IMPORT_ERROR" in result.output

    def test_bad_arguments(self, runner: CliRunner, tmp_path: Path):
        cases = _write_cases(tmp_path, [
            {"url": "~/products/3", "controller": "sample_app:ProductsController", "action": "show", "args": [1, 2]},
        ])
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "run", cases])
        assert result.exit_code == 2
        assert "CASE_ERROR" in result.output


class TestShowCommand:
    def test_show(self, runner: CliRunner):
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "show", "~/products/3"])
        assert result.exit_code == 0
        assert "handler: MvcRouteHandler" in result.output
        assert " id: 3" in result.output

    def test_show_with_method(self, runner: CliRunner):
        result = runner.invoke(
            main, ["--routes", "sample_app:ROUTES", "--json", "show", "~/products/new", "-m", "post"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["values"]["action"] == "create"

    def test_show_no_route(self, runner: CliRunner):
        result = runner.invoke(main, ["--routes", "sample_app:ROUTES", "show", "~/nowhere"])
        assert result.exit_code == 2

    def test_routes_file_that_fails_to_import(self, runner: CliRunner, tmp_path: Path):
        routes_file = tmp_path / "broken_routes.py"
        routes_file.write_text("import does_not_exist\n\nroutes = None\n")
        result = runner.invoke(main, ["--routes", f"{routes_file}:routes", "show", "~/"])
        assert result.exit_code == 1
        assert "IMPORT_ERROR" in result.output
        assert "Traceback" not in result.output

    def test_routes_module_that_fails_to_import(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        (tmp_path / "broken_module_routes.py").write_text("raise RuntimeError('boom')\n")
        monkeypatch.syspath_prepend(str(tmp_path))
        result = runner.invoke(main, ["--routes", "broken_module_routes:routes", "show", "~/"])
        assert result.exit_code == 1
        assert "IMPORT_ERROR" in result.output
