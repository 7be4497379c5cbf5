"""Convert JSON objects into CSV rows.

Each top-level JSON object becomes one CSV row. Nested objects and arrays
are flattened into compound column names (``a.b.0``), the header is the
sorted union of every row's keys, and keys that collide after flattening
are reported as errors.
"""

from .converter import Json2Csv
from .csv_io import CsvSink, sink_to_string
from .errors import (
    ConfigError,
    Json2CsvError,
    KeyCollisionError,
    NotAnObjectError,
    ParseError,
    SinkWriteError,
)
from .flattener import ArrayFormatting, FlatRow, FlattenerConfig, flatten_json, render_scalar
from .reader import iter_json_documents, load_json_array

__all__ = [
    "ArrayFormatting",
    "ConfigError",
    "CsvSink",
    "FlatRow",
    "FlattenerConfig",
    "Json2Csv",
    "Json2CsvError",
    "KeyCollisionError",
    "NotAnObjectError",
    "ParseError",
    "SinkWriteError",
    "flatten_json",
    "iter_json_documents",
    "load_json_array",
    "render_scalar",
    "sink_to_string",
]
