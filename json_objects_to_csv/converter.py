"""Convert sequences of JSON objects into CSV rows.

Conversion runs in two phases. Every input object is flattened and kept in
memory while the union of flattened keys is collected; only then is the
sorted header written, followed by one row per object in arrival order.
Nothing reaches the sink if any object fails to parse or flatten.
"""

from __future__ import annotations

import logging
from typing import IO, Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .errors import KeyCollisionError, NotAnObjectError
from .flattener import FlatRow, FlattenerConfig, Path, flatten_json
from .reader import DEFAULT_CHUNK_SIZE, iter_json_documents

logger = logging.getLogger(__name__)


class RecordSink(Protocol):
    def write_record(self, fields: Sequence[str]) -> None: ...

    def flush(self) -> None: ...


class HeaderSet:
    """Union of flattened keys seen across rows.

    Each key remembers the structural path that first produced it, so a key
    produced by a different path in a later row is reported as a collision
    (``{"a": {"b": 1}}`` followed by ``{"a.b": 2}``).
    """

    def __init__(self) -> None:
        self._paths: Dict[str, Path] = {}

    def update(self, row: FlatRow) -> None:
        for key, path in row.paths.items():
            known = self._paths.setdefault(key, path)
            if known != path:
                raise KeyCollisionError(key)

    def sorted_keys(self) -> List[str]:
        return sorted(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, key: object) -> bool:
        return key in self._paths


def build_record(headers: Sequence[str], row: FlatRow) -> List[str]:
    """Return the cells of ``row`` in header order, empty where missing."""
    return [row.get(key, "") for key in headers]


class Json2Csv:
    """JSON objects to CSV converter.

    Parameters
    ----------
    config : FlattenerConfig, optional
        Flattening policy applied to every object (default: ``FlattenerConfig()``).

    Examples
    --------
    >>> from json_objects_to_csv.csv_io import sink_to_string
    >>> sink, buffer = sink_to_string()
    >>> Json2Csv().convert_from_array([{"a": {"b": 1}}, {"c": [2]}], sink)
    2
    >>> buffer.getvalue()
    'a.b,c.0\\n1,\\n,2\\n'
    """

    def __init__(self, config: Optional[FlattenerConfig] = None) -> None:
        self.config = config if config is not None else FlattenerConfig()

    def convert_from_array(self, objects: Iterable[Any], sink: RecordSink) -> int:
        """Flatten each object in ``objects`` and write one CSV row per object.

        Returns
        -------
        int
            Number of data rows written.

        Raises
        ------
        NotAnObjectError
            If an element is not a JSON object.
        KeyCollisionError
            If flattening makes two different paths look the same.
        SinkWriteError
            If writing to ``sink`` fails.
        """
        return self._convert(((None, obj) for obj in objects), sink)

    def convert_from_reader(
        self,
        stream: IO[Any],
        sink: RecordSink,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> int:
        """Flatten each JSON document in ``stream`` and write one CSV row per document.

        The stream holds JSON objects one after the other, optionally
        separated by whitespace.

        Returns
        -------
        int
            Number of data rows written.

        Raises
        ------
        ParseError
            If a document is malformed or is not an object.
        KeyCollisionError
            If flattening makes two different paths look the same.
        SinkWriteError
            If writing to ``sink`` fails.
        """
        return self._convert(iter_json_documents(stream, chunk_size=chunk_size), sink)

    def collect(self, documents: Iterable[Tuple[Optional[int], Any]]) -> Tuple[List[str], List[FlatRow]]:
        """Flatten every document and return the sorted header and the rows."""
        headers = HeaderSet()
        rows: List[FlatRow] = []
        for index, (position, obj) in enumerate(documents):
            try:
                row = flatten_json(obj, self.config, document=index)
            except NotAnObjectError as exc:
                if position is None:
                    raise
                raise NotAnObjectError(
                    f"expected a JSON object, got {type(obj).__name__}", position, index
                ) from exc
            headers.update(row)
            rows.append(row)
        return headers.sorted_keys(), rows

    def _convert(self, documents: Iterable[Tuple[Optional[int], Any]], sink: RecordSink) -> int:
        headers, rows = self.collect(documents)
        logger.debug("collected %d row(s) with %d column(s)", len(rows), len(headers))

        if not rows:
            return 0

        sink.write_record(headers)
        for row in rows:
            sink.write_record(build_record(headers, row))
        sink.flush()
        return len(rows)
