"""Tests for the no-unsafe-any CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from no_unsafe_any.cli.app import app
from no_unsafe_any.config import ENV_ALLOW_ANNOTATION_ON_DYNAMIC_INIT

runner = CliRunner()

ANNOTATED = "const b: Config = JSON.parse(s);\n"
ANNOTATED_TYPES = {"types": [{"start": 18, "end": 31, "type": "any"}]}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_ALLOW_ANNOTATION_ON_DYNAMIC_INIT, raising=False)


@pytest.fixture
def annotated(tmp_path: Path) -> tuple[Path, Path]:
    source = tmp_path / "annotated.ts"
    source.write_text(ANNOTATED, encoding="utf-8")
    types = tmp_path / "annotated.types.json"
    types.write_text(json.dumps(ANNOTATED_TYPES), encoding="utf-8")
    return source, types


@pytest.mark.parametrize(
    "args",
    [["-h"], ["check", "-h"], ["messages", "-h"]],
    ids=["root", "check", "messages"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, args)

    assert result.exit_code == 0
    assert "Usage" in result.output


class TestCheck:
    def test_clean_file(self, tmp_path: Path) -> None:
        path = tmp_path / "clean.ts"
        path.write_text("const n: number = 1;\n", encoding="utf-8")

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 0
        assert "No unsafe any usage found" in result.output

    def test_reports_problems(self, tmp_path: Path) -> None:
        path = tmp_path / "dirty.ts"
        path.write_text("let x;\n", encoding="utf-8")

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert ":1:5" in result.output
        assert "letVariableWithNoInitialAndNoAnnotation" in result.output
        assert "1 problem(s)" in result.output

    def test_json_output(self, tmp_path: Path) -> None:
        path = tmp_path / "dirty.ts"
        path.write_text("var y = null;\n", encoding="utf-8")

        result = runner.invoke(app, ["check", str(path), "--format", "json"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["path"] == str(path)
        assert [d["message_id"] for d in payload["diagnostics"]] == ["letVariableInitialisedToNullishAndNoAnnotation"]
        assert payload["diagnostics"][0]["data"] == {"kind": "var"}

    def test_type_table(self, annotated: tuple[Path, Path]) -> None:
        source, types = annotated

        result = runner.invoke(app, ["check", str(source), "--types", str(types)])

        assert result.exit_code == 1
        assert "variableDeclarationInitialisedToAnyWithAnnotation" in result.output

    def test_flag_allows_annotation(self, annotated: tuple[Path, Path]) -> None:
        source, types = annotated

        result = runner.invoke(
            app, ["check", str(source), "--types", str(types), "--allow-annotation-on-dynamic-init"]
        )

        assert result.exit_code == 0

    def test_env_allows_annotation(self, annotated: tuple[Path, Path]) -> None:
        source, types = annotated

        result = runner.invoke(
            app, ["check", str(source), "--types", str(types)], env={ENV_ALLOW_ANNOTATION_ON_DYNAMIC_INIT: "true"}
        )

        assert result.exit_code == 0

    def test_config_file_overrides_env(self, annotated: tuple[Path, Path], tmp_path: Path) -> None:
        source, types = annotated
        config = tmp_path / "rule.json"
        config.write_text(json.dumps({"allowAnnotationOnDynamicInit": False}), encoding="utf-8")

        result = runner.invoke(
            app,
            ["check", str(source), "--types", str(types), "--config", str(config)],
            env={ENV_ALLOW_ANNOTATION_ON_DYNAMIC_INIT: "1"},
        )

        assert result.exit_code == 1

    def test_invalid_config(self, annotated: tuple[Path, Path], tmp_path: Path) -> None:
        source, _ = annotated
        config = tmp_path / "rule.json"
        config.write_text(json.dumps({"allowEverything": True}), encoding="utf-8")

        result = runner.invoke(app, ["check", str(source), "--config", str(config)])

        assert result.exit_code == 2
        assert "Invalid rule options" in result.output

    def test_missing_source(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["check", str(tmp_path / "missing.ts")])

        assert result.exit_code == 2
        assert "File not found" in result.output

    def test_missing_type_table(self, annotated: tuple[Path, Path], tmp_path: Path) -> None:
        source, _ = annotated

        result = runner.invoke(app, ["check", str(source), "--types", str(tmp_path / "nope.json")])

        assert result.exit_code == 2
        assert "Type table not found" in result.output


class TestMessages:
    def test_lists_all_messages(self) -> None:
        result = runner.invoke(app, ["messages"])

        assert result.exit_code == 0
        assert "(14 messages)" in result.output
