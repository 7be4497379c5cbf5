"""Tests for CSV I/O operations."""

import io

import pytest

from json_objects_to_csv.csv_io import CsvSink, sink_to_string
from json_objects_to_csv.errors import SinkWriteError


def test_sink_writes_records() -> None:
    """Test records are joined with the delimiter and terminated."""
    sink, buffer = sink_to_string()
    sink.write_record(["a", "b"])
    sink.write_record(["1", ""])
    sink.flush()
    assert buffer.getvalue() == "a,b\n1,\n"
    assert sink.records_written == 2


def test_sink_custom_delimiter_and_terminator() -> None:
    """Test delimiter and line terminator are configurable."""
    sink, buffer = sink_to_string(delimiter=";", line_terminator="\r\n")
    sink.write_record(["a", "b;c"])
    assert buffer.getvalue() == 'a;"b;c"\r\n'


def test_sink_empty_record() -> None:
    """Test a record without fields is an empty line."""
    sink, buffer = sink_to_string()
    sink.write_record([])
    assert buffer.getvalue() == "\n"


def test_sink_rejects_long_delimiter() -> None:
    """Test that a multi-character delimiter raises ValueError."""
    with pytest.raises(ValueError, match="delimiter"):
        CsvSink(io.StringIO(), delimiter="::")


class _BrokenHandle(io.StringIO):
    def write(self, text: str) -> int:
        raise OSError("No space left on device")


def test_sink_wraps_write_errors() -> None:
    """Test handle failures surface as SinkWriteError."""
    sink = CsvSink(_BrokenHandle())
    with pytest.raises(SinkWriteError):
        sink.write_record(["a"])

