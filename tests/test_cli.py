"""Tests for the json2csv command line."""

from __future__ import annotations

import csv
import io
import sys
from pathlib import Path
from typing import Dict, List

import pytest

from json_objects_to_csv.cli import main

SOURCE = '{"a": {"b": 1}} {"c": [2]} {"d": []} {"e": {}}\n'


def _read_records(path: Path) -> List[Dict[str, str]]:
    with path.open("r", newline="", encoding="utf-8") as handle:
        return list(csv.DictReader(handle))


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    path = tmp_path / "input.json"
    path.write_text(SOURCE, encoding="utf-8")
    return path


def test_file_to_file(input_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "result.csv"
    assert main(["--input", str(input_file), "--output", str(output)]) == 0
    assert output.read_text(encoding="utf-8") == "a.b,c.0\n1,\n,2\n,\n,\n"


def test_output_can_be_read_back(input_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "result.csv"
    assert main(["--input", str(input_file), "--output", str(output), "--preserve-empty-arrays"]) == 0
    records = _read_records(output)
    assert len(records) == 4
    assert list(records[0]) == ["a.b", "c.0", "d"]
    assert records[0]["a.b"] == "1"
    assert records[1]["c.0"] == "2"


def test_stdout(input_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--input", str(input_file), "--array-format", "surrounded", "--delimiter", ";"]) == 0
    assert capsys.readouterr().out == "a.b;c[0]\n1;\n;2\n;\n;\n"


def test_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    stdin = io.TextIOWrapper(io.BytesIO(b'{"x": 1}\n{"y": true}\n'), encoding="utf-8")
    monkeypatch.setattr(sys, "stdin", stdin)
    assert main([]) == 0
    assert capsys.readouterr().out == "x,y\n1,\n,true\n"


def test_array_format(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "array.json"
    path.write_text('[{"a": {"b": 1}}, {"a": {"c": 2}}]', encoding="utf-8")
    assert main(["--input", str(path), "--format", "array", "--sep", "_"]) == 0
    assert capsys.readouterr().out == "a_b,a_c\n1,\n,2\n"


def test_array_format_rejects_non_array(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "object.json"
    path.write_text('{"a": 1}', encoding="utf-8")
    assert main(["--input", str(path), "--format", "array"]) == 1
    assert "expected a JSON array" in capsys.readouterr().err


def test_config_file_with_override(input_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "json2csv.yml"
    config.write_text(
        "flatten:\n"
        "  preserve_empty_arrays: true\n"
        "  preserve_empty_objects: true\n"
        "csv:\n"
        "  delimiter: ';'\n",
        encoding="utf-8",
    )
    assert main(["--input", str(input_file), "--config", str(config), "--delimiter", ","]) == 0
    assert capsys.readouterr().out.splitlines() == ["a.b,c.0,d,e", "1,,,", ",2,,", ",,,", ",,,"]


def test_collision_leaves_no_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "collide.json"
    path.write_text('{"a": {"b": 1}} {"a.b": 2}', encoding="utf-8")
    output = tmp_path / "result.csv"
    assert main(["--input", str(path), "--output", str(output)]) == 1
    assert not output.exists()
    assert "ERROR:" in capsys.readouterr().err


def test_parse_error_reports_position(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"a": 1} {"b": ', encoding="utf-8")
    assert main(["--input", str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "document 1 at offset 15" in captured.err


def test_missing_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--input", str(tmp_path / "missing.json")]) == 1
    assert "ERROR:" in capsys.readouterr().err


def test_missing_config(input_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--input", str(input_file), "--config", str(tmp_path / "none.yml")]) == 1
    assert "config not found" in capsys.readouterr().err


def test_invalid_choice_exits() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--array-format", "curly"])
    assert excinfo.value.code == 2


def test_flag_turns_off_config_preserve(input_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "json2csv.yml"
    config.write_text("flatten:\n  preserve_empty_arrays: true\n  preserve_empty_objects: true\n", encoding="utf-8")
    argv = ["--input", str(input_file), "--config", str(config), "--no-preserve-empty-arrays"]
    assert main(argv) == 0
    assert capsys.readouterr().out.splitlines() == ["a.b,c.0,e", "1,,", ",2,", ",,", ",,"]


def test_non_finite_numbers_rejected_in_array_format(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "nan.json"
    path.write_text('[{"a": NaN}, {"b": Infinity}]', encoding="utf-8")
    assert main(["--input", str(path), "--format", "array"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "malformed JSON" in captured.err


@pytest.mark.parametrize("input_format", ["stream", "array"])
def test_deeply_nested_input(input_format: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    depth = 3000
    document = '{"a": ' + "[" * depth + "1" + "]" * depth + "}"
    path = tmp_path / "deep.json"
    path.write_text(f"[{document}]" if input_format == "array" else document, encoding="utf-8")
    assert main(["--input", str(path), "--format", input_format]) == 0
    assert capsys.readouterr().out == "a" + ".0" * depth + "\n1\n"
