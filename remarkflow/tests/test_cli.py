"""Tests for the remarkflow command line."""

import json

from typer.testing import CliRunner

from remarkflow import __version__
from remarkflow.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_parse_prints_typed_result():
    result = runner.invoke(app, ["parse", "?[Yes//y | No//n]"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "type": "non_assignment_button",
        "buttons": [{"display": "Yes", "value": "y"}, {"display": "No", "value": "n"}],
    }


def test_parse_variable_block():
    result = runner.invoke(app, ["parse", "?[%{{name}}...Your name]"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "type": "text_only",
        "variable": "name",
        "question": "Your name",
    }


def test_parse_malformed_block_fails():
    result = runner.invoke(app, ["parse", "not a block"])
    assert result.exit_code == 1


def test_display_falls_back_to_placeholder():
    result = runner.invoke(app, ["display", "  not a block "])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"placeholder": "not a block"}


def test_display_buttons():
    result = runner.invoke(app, ["display", "?[%{{fruit}} 苹果｜香蕉]"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "variableName": "fruit",
        "buttonTexts": ["苹果", "香蕉"],
        "buttonValues": ["苹果", "香蕉"],
    }


def test_scan_file_as_json(tmp_path):
    doc = tmp_path / "lesson.md"
    doc.write_text(
        "# Lesson\n\nReady? ?[Start//start]\n\nColour: ?[%{{color}} red | blue | ...other]\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["scan", str(doc), "--json"])
    assert result.exit_code == 0
    elements = json.loads(result.stdout)
    assert [e["data"]["hProperties"] for e in elements] == [
        {"buttonTexts": ["Start"], "buttonValues": ["start"]},
        {
            "variableName": "color",
            "buttonTexts": ["red", "blue"],
            "buttonValues": ["red", "blue"],
            "placeholder": "other",
        },
    ]


def test_scan_table(tmp_path):
    doc = tmp_path / "lesson.md"
    doc.write_text("Line one\nPick ?[%{{size}} small | large]\n", encoding="utf-8")
    result = runner.invoke(app, ["scan", str(doc)])
    assert result.exit_code == 0
    assert "size" in result.stdout
    assert "small | large" in result.stdout


def test_scan_stdin():
    result = runner.invoke(app, ["scan", "-", "--json"], input="Go ?[A | B]")
    assert result.exit_code == 0
    assert len(json.loads(result.stdout)) == 1


def test_scan_missing_file(tmp_path):
    result = runner.invoke(app, ["scan", str(tmp_path / "missing.md")])
    assert result.exit_code == 1


def test_scan_without_blocks(tmp_path):
    doc = tmp_path / "plain.md"
    doc.write_text("Nothing to see here.\n", encoding="utf-8")
    result = runner.invoke(app, ["scan", str(doc)])
    assert result.exit_code == 0
    assert "No interaction blocks found" in result.stdout
