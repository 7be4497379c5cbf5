"""Exception types raised while converting JSON objects to CSV."""

from __future__ import annotations

from typing import Optional


class Json2CsvError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(Json2CsvError):
    """Raised when a configuration file or override is invalid."""


class KeyCollisionError(Json2CsvError):
    """Two distinct paths produced the same flattened key.

    Attributes
    ----------
    key : str
        The flattened key that was produced twice.
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"flattened key collision on {key!r}")
        self.key = key


class ParseError(Json2CsvError):
    """Malformed JSON, or a top-level document that is not an object.

    Attributes
    ----------
    position : int | None
        Number of input bytes read when the problem was detected, or None
        when the input did not come from a stream.
    document : int
        Zero-based index of the offending document.
    """

    def __init__(self, message: str, position: Optional[int], document: int) -> None:
        where = f"document {document}"
        if position is not None:
            where += f" at offset {position}"
        super().__init__(f"{message} ({where})")
        self.position = position
        self.document = document


class NotAnObjectError(ParseError):
    """A top-level JSON value is valid but is not an object."""


class SinkWriteError(Json2CsvError):
    """The CSV output collaborator failed to write a record."""
