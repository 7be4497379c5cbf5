"""Incremental reader for concatenated JSON documents.

Input is a sequence of top-level JSON values written one after the other,
optionally separated by whitespace (``{"a": 1} {"b": 2}\\n{"c": 3}``). It is
not a JSON array. Parsing is done by ``ijson`` through its push interface,
so the stream is read one chunk at a time and a malformed document is
reported as soon as the chunk holding it is parsed.
"""

from __future__ import annotations

import logging
from typing import IO, Any, Iterator, List, Tuple

import ijson

from .errors import ParseError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

_WHITESPACE = b" \t\n\r"


def _describe(exc: Exception) -> str:
    lines = str(exc).strip().splitlines()
    return lines[0] if lines else type(exc).__name__


def iter_json_documents(
    stream: IO[Any],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8",
) -> Iterator[Tuple[int, Any]]:
    """Yield ``(position, value)`` for each JSON document in ``stream``.

    Parameters
    ----------
    stream : IO
        Binary or text stream. Text is encoded with ``encoding`` before
        parsing.
    chunk_size : int, optional
        Number of bytes or characters requested per read.
    encoding : str, optional
        Encoding used for text streams (default: "utf-8").

    Yields
    ------
    Tuple[int, Any]
        Number of input bytes read when the document was completed, and the
        parsed value. Numbers are ``int`` or ``float``.

    Raises
    ------
    ParseError
        On malformed JSON (including ``NaN``/``Infinity`` and invalid
        UTF-8), naming the index of the failing document and the number of
        bytes read when the failure was detected.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    documents: List[Any] = ijson.sendable_list()
    parser = None
    consumed = 0
    index = 0
    eof = False

    try:
        while not eof:
            chunk = stream.read(chunk_size)
            if isinstance(chunk, str):
                chunk = chunk.encode(encoding)
            consumed += len(chunk)

            error = None
            try:
                if not chunk:
                    eof = True
                    if parser is not None:
                        parser.close()
                elif parser is not None or chunk.strip(_WHITESPACE):
                    # Created on first content: ijson rejects empty input.
                    if parser is None:
                        parser = ijson.items_coro(documents, "", multiple_values=True, use_float=True)
                    parser.send(chunk)
            except ijson.JSONError as exc:
                error = exc

            for value in documents:
                yield consumed, value
                index += 1
            del documents[:]

            if error is not None:
                parser = None
                raise ParseError(f"malformed JSON: {_describe(error)}", consumed, index) from error
    except GeneratorExit:
        # The caller stopped early; the unfinished parse has nothing to report.
        if parser is not None:
            try:
                parser.close()
            except ijson.JSONError:
                pass
        raise

    logger.debug("read %d JSON document(s), %d byte(s)", index, consumed)


def load_json_array(stream: IO[Any], chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[Any]:
    """Parse ``stream`` as a single JSON array and return its elements.

    Raises
    ------
    ParseError
        If the input is malformed, empty, or anything other than one array.
    """
    values = list(iter_json_documents(stream, chunk_size=chunk_size))
    if len(values) != 1:
        raise ParseError(f"expected a single JSON array, got {len(values)} document(s)", None, 0)
    position, data = values[0]
    if not isinstance(data, list):
        raise ParseError(f"expected a JSON array, got {type(data).__name__}", position, 0)
    return data
