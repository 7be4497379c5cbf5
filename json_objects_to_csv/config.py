"""
config
======

YAML configuration for the ``json2csv`` command.

Example ``json2csv.yml``::

    flatten:
      key_separator: "."
      array_formatting: surrounded   # or "plain"
      array_start: "["
      array_end: "]"
      preserve_empty_arrays: false
      preserve_empty_objects: false
    csv:
      delimiter: ";"
      line_terminator: "\\n"
    input:
      format: stream                 # or "array"

Values given on the command line take precedence over the file, and the
file takes precedence over the built-in defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .csv_io import DEFAULT_DELIMITER, DEFAULT_LINE_TERMINATOR
from .errors import ConfigError
from .flattener import PLAIN, SURROUNDED, ArrayFormatting, FlattenerConfig

INPUT_FORMATS = ("stream", "array")


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one conversion run.

    Attributes:
        flattener: Flattening policy.
        delimiter: CSV field delimiter.
        line_terminator: CSV record terminator.
        input_format: ``stream`` for concatenated documents, ``array`` for a
            single JSON array of objects.
    """

    flattener: FlattenerConfig = field(default_factory=FlattenerConfig)
    delimiter: str = DEFAULT_DELIMITER
    line_terminator: str = DEFAULT_LINE_TERMINATOR
    input_format: str = "stream"


def load_config(path: Path) -> Dict[str, Any]:
    """Load YAML config file; an empty file yields an empty dict."""
    if not path.exists():
        raise ConfigError(f"config not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return data


def deep_get(d: Mapping[str, Any], keys: List[str], default: Any = None) -> Any:
    """Safely get nested dict value with default."""
    cur: Any = d
    for k in keys:
        if not isinstance(cur, Mapping) or k not in cur:
            return default
        cur = cur[k]
    return cur


def pick(val_cli: Any, val_cfg: Any, default: Any) -> Any:
    """Pick the CLI value if given, else the config value, else ``default``."""
    if val_cli is not None:
        return val_cli
    if val_cfg is not None:
        return val_cfg
    return default


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{name} must be true or false, got {value!r}")


def _as_str(value: Any, name: str) -> str:
    if isinstance(value, str):
        return value
    raise ConfigError(f"{name} must be a string, got {value!r}")


def build_settings(cfg: Mapping[str, Any], overrides: Optional[Mapping[str, Any]] = None) -> Settings:
    """Merge config file values and CLI overrides into :class:`Settings`.

    Args:
        cfg: Parsed config file (may be empty).
        overrides: CLI values keyed by setting name; ``None`` means unset.

    Raises:
        ConfigError: If a value has the wrong type or is out of range.
    """
    overrides = overrides or {}
    defaults = FlattenerConfig()

    def resolve(name: str, section: str, default: Any) -> Any:
        return pick(overrides.get(name), deep_get(cfg, [section, name]), default)

    separator = _as_str(resolve("key_separator", "flatten", defaults.key_separator), "key_separator")
    mode = _as_str(resolve("array_formatting", "flatten", PLAIN), "array_formatting")
    if mode not in (PLAIN, SURROUNDED):
        raise ConfigError(f"array_formatting must be 'plain' or 'surrounded', got {mode!r}")
    start = _as_str(resolve("array_start", "flatten", "["), "array_start")
    end = _as_str(resolve("array_end", "flatten", "]"), "array_end")

    flattener = FlattenerConfig(
        key_separator=separator,
        array_formatting=ArrayFormatting(mode=mode, start=start, end=end),
        preserve_empty_arrays=_as_bool(
            resolve("preserve_empty_arrays", "flatten", False), "preserve_empty_arrays"
        ),
        preserve_empty_objects=_as_bool(
            resolve("preserve_empty_objects", "flatten", False), "preserve_empty_objects"
        ),
    )

    delimiter = _as_str(resolve("delimiter", "csv", DEFAULT_DELIMITER), "delimiter")
    if len(delimiter) != 1:
        raise ConfigError(f"delimiter must be a single character, got {delimiter!r}")
    line_terminator = _as_str(resolve("line_terminator", "csv", DEFAULT_LINE_TERMINATOR), "line_terminator")

    input_format = _as_str(resolve("format", "input", "stream"), "format")
    if input_format not in INPUT_FORMATS:
        raise ConfigError(f"input format must be one of {INPUT_FORMATS}, got {input_format!r}")

    return Settings(
        flattener=flattener,
        delimiter=delimiter,
        line_terminator=line_terminator,
        input_format=input_format,
    )
