"""Core JSON flattening utilities.

This module turns one JSON object into a flat row: an ordered mapping from
compound keys (``a.b.0`` or ``a.b[0]``) to rendered text cells. The rules
used to build the keys are carried by an immutable :class:`FlattenerConfig`,
so :func:`flatten_json` is a pure function of its input and configuration.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import KeyCollisionError, NotAnObjectError

PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]

PLAIN = "plain"
SURROUNDED = "surrounded"


@dataclass(frozen=True)
class ArrayFormatting:
    """How an array index is encoded into a flattened key.

    Attributes
    ----------
    mode : str
        ``"plain"`` joins the index with the key separator (``c.0``);
        ``"surrounded"`` wraps it in ``start``/``end`` (``c[0]``).
    start : str
        Opening delimiter used in surrounded mode.
    end : str
        Closing delimiter used in surrounded mode.
    """

    mode: str = PLAIN
    start: str = "["
    end: str = "]"

    def __post_init__(self) -> None:
        if self.mode not in (PLAIN, SURROUNDED):
            raise ValueError(f"array formatting mode must be 'plain' or 'surrounded', got {self.mode!r}")
        if not isinstance(self.start, str) or not isinstance(self.end, str):
            raise ValueError("array delimiters must be strings")

    @classmethod
    def plain(cls) -> "ArrayFormatting":
        return cls(mode=PLAIN)

    @classmethod
    def surrounded(cls, start: str = "[", end: str = "]") -> "ArrayFormatting":
        return cls(mode=SURROUNDED, start=start, end=end)

    def index_key(self, prefix: str, index: int, sep: str) -> str:
        """Return the key for element ``index`` of the array found at ``prefix``."""
        if self.mode == SURROUNDED:
            return f"{prefix}{self.start}{index}{self.end}"
        return f"{prefix}{sep}{index}"


@dataclass(frozen=True)
class FlattenerConfig:
    """Immutable flattening policy.

    Use the ``with_*`` methods to derive a modified copy::

        config = (
            FlattenerConfig()
            .with_key_separator("_")
            .with_array_formatting(ArrayFormatting.surrounded())
            .with_preserve_empty_arrays(True)
        )
    """

    key_separator: str = "."
    array_formatting: ArrayFormatting = field(default_factory=ArrayFormatting.plain)
    preserve_empty_arrays: bool = False
    preserve_empty_objects: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.key_separator, str):
            raise ValueError(f"key_separator must be a string, got {self.key_separator!r}")
        if not isinstance(self.array_formatting, ArrayFormatting):
            raise ValueError(f"array_formatting must be an ArrayFormatting, got {self.array_formatting!r}")

    def with_key_separator(self, separator: str) -> "FlattenerConfig":
        return replace(self, key_separator=separator)

    def with_array_formatting(self, formatting: ArrayFormatting) -> "FlattenerConfig":
        return replace(self, array_formatting=formatting)

    def with_preserve_empty_arrays(self, preserve: bool) -> "FlattenerConfig":
        return replace(self, preserve_empty_arrays=bool(preserve))

    def with_preserve_empty_objects(self, preserve: bool) -> "FlattenerConfig":
        return replace(self, preserve_empty_objects=bool(preserve))


@dataclass
class FlatRow:
    """One flattened JSON object.

    ``cells`` maps each flattened key to its rendered text, in traversal
    order. ``paths`` records the structural path (object keys as ``str``,
    array indices as ``int``) that produced each key.
    """

    cells: Dict[str, str] = field(default_factory=dict)
    paths: Dict[str, Path] = field(default_factory=dict)

    def add(self, key: str, path: Path, cell: str) -> None:
        """Insert a cell, failing on the first key produced twice."""
        if key in self.cells:
            raise KeyCollisionError(key)
        self.cells[key] = cell
        self.paths[key] = path

    def keys(self) -> List[str]:
        return list(self.cells)

    def get(self, key: str, default: str = "") -> str:
        return self.cells.get(key, default)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self.cells.items())

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, key: object) -> bool:
        return key in self.cells


def render_scalar(value: Any) -> str:
    """Render a JSON scalar as CSV cell text.

    Parameters
    ----------
    value : Any
        A JSON scalar, or an empty container kept by a preserve option.

    Returns
    -------
    str
        ``""`` for ``None`` and empty containers, ``true``/``false`` for
        booleans, the canonical JSON text for numbers and the string
        itself for strings.

    Examples
    --------
    >>> render_scalar(None)
    ''
    >>> render_scalar(True)
    'true'
    >>> render_scalar(2.5)
    '2.5'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Mapping, list, tuple)) and not value:
        return ""
    return str(value)


def flatten_json(
    data: Any,
    config: Optional[FlattenerConfig] = None,
    document: int = 0,
) -> FlatRow:
    """Flatten one JSON object into a :class:`FlatRow`.

    Objects and arrays are walked depth first. Object members are joined to
    their parent with ``config.key_separator``; array elements use
    ``config.array_formatting``. Empty containers below the top level are
    dropped unless the matching preserve option is on, in which case they
    become an empty cell under their own key.

    Parameters
    ----------
    data : Any
        The JSON value to flatten. Must be an object (a ``Mapping``).
    config : FlattenerConfig, optional
        Flattening policy (default: ``FlattenerConfig()``).
    document : int, optional
        Index of ``data`` in its input, used only in error messages.

    Returns
    -------
    FlatRow
        The flattened row.

    Raises
    ------
    NotAnObjectError
        If ``data`` is not an object.
    KeyCollisionError
        If two paths inside ``data`` produce the same key.

    Examples
    --------
    >>> flatten_json({"a": {"b": 1}, "c": [2]}).cells
    {'a.b': '1', 'c.0': '2'}
    """
    if config is None:
        config = FlattenerConfig()
    if not isinstance(data, Mapping):
        raise NotAnObjectError(
            f"expected a JSON object, got {type(data).__name__}",
            position=None,
            document=document,
        )

    sep = config.key_separator
    arrays = config.array_formatting
    row = FlatRow()

    # Explicit stack so nesting depth is not bounded by the interpreter's
    # recursion limit. Children are pushed in reverse to keep document order.
    # The root has no key of its own, so its members start without a separator.
    stack: List[Tuple[Any, str, Path]] = [
        (value, str(key), (str(key),)) for key, value in reversed(list(data.items()))
    ]
    while stack:
        obj, prefix, path = stack.pop()

        if isinstance(obj, Mapping):
            if not obj:
                if config.preserve_empty_objects:
                    row.add(prefix, path, "")
                continue
            children = []
            for key, value in obj.items():
                key = str(key)
                children.append((value, f"{prefix}{sep}{key}", path + (key,)))
            stack.extend(reversed(children))
            continue

        if isinstance(obj, (list, tuple)):
            if not obj:
                if config.preserve_empty_arrays:
                    row.add(prefix, path, "")
                continue
            stack.extend(
                (obj[idx], arrays.index_key(prefix, idx, sep), path + (idx,))
                for idx in reversed(range(len(obj)))
            )
            continue

        row.add(prefix, path, render_scalar(obj))

    return row
