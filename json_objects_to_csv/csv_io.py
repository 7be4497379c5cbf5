"""CSV helpers for flattened records.

The converter only hands over already-rendered text fields in header
order. Quoting, delimiters and line endings are owned by :class:`CsvSink`,
a thin wrapper around :func:`csv.writer`.
"""

from __future__ import annotations

import csv
import io
from typing import IO, Sequence, Tuple

from .errors import SinkWriteError

DEFAULT_DELIMITER = ","
DEFAULT_LINE_TERMINATOR = "\n"


class CsvSink:
    """Write CSV records to a text handle.

    Parameters
    ----------
    handle : IO[str]
        Text handle opened with ``newline=""``.
    delimiter : str, optional
        Field delimiter (default: ",").
    line_terminator : str, optional
        Record terminator (default: "\\n").
    """

    def __init__(
        self,
        handle: IO[str],
        delimiter: str = DEFAULT_DELIMITER,
        line_terminator: str = DEFAULT_LINE_TERMINATOR,
    ) -> None:
        if not isinstance(delimiter, str) or len(delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
        self._handle = handle
        self._writer = csv.writer(handle, delimiter=delimiter, lineterminator=line_terminator)
        self.records_written = 0

    def write_record(self, fields: Sequence[str]) -> None:
        try:
            self._writer.writerow(fields)
        except (OSError, csv.Error) as exc:
            raise SinkWriteError(f"failed to write CSV record: {exc}") from exc
        self.records_written += 1

    def flush(self) -> None:
        try:
            self._handle.flush()
        except OSError as exc:
            raise SinkWriteError(f"failed to flush CSV output: {exc}") from exc


def sink_to_string(
    delimiter: str = DEFAULT_DELIMITER,
    line_terminator: str = DEFAULT_LINE_TERMINATOR,
) -> Tuple[CsvSink, io.StringIO]:
    """Return a sink backed by an in-memory buffer, and the buffer."""
    buffer = io.StringIO(newline="")
    return CsvSink(buffer, delimiter=delimiter, line_terminator=line_terminator), buffer

