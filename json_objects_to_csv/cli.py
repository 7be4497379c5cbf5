"""Command-line interface for JSON objects to CSV conversion."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import IO, Sequence, Tuple

from .config import INPUT_FORMATS, Settings, build_settings, load_config
from .converter import Json2Csv
from .csv_io import sink_to_string
from .errors import Json2CsvError
from .flattener import PLAIN, SURROUNDED
from .reader import load_json_array

logger = logging.getLogger("json_objects_to_csv")


def _convert(settings: Settings, handle: IO[bytes]) -> Tuple[str, int]:
    sink, buffer = sink_to_string(settings.delimiter, settings.line_terminator)
    converter = Json2Csv(settings.flattener)
    if settings.input_format == "array":
        count = converter.convert_from_array(load_json_array(handle), sink)
    else:
        count = converter.convert_from_reader(handle, sink)
    return buffer.getvalue(), count


def _add_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", default="-", help="Path to JSON input, or - for stdin (default: -)")
    parser.add_argument("--output", default="-", help="Path to CSV output, or - for stdout (default: -)")
    parser.add_argument("--config", type=Path, default=None, help="Path to YAML config")
    parser.add_argument("--sep", dest="key_separator", default=None, help="Key separator (default: .)")
    parser.add_argument(
        "--array-format",
        dest="array_formatting",
        choices=[PLAIN, SURROUNDED],
        default=None,
        help="Array index formatting (default: plain)",
    )
    parser.add_argument("--array-start", default=None, help="Opening delimiter for surrounded indices (default: [)")
    parser.add_argument("--array-end", default=None, help="Closing delimiter for surrounded indices (default: ])")
    parser.add_argument(
        "--preserve-empty-arrays",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep empty arrays as empty columns",
    )
    parser.add_argument(
        "--preserve-empty-objects",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep empty objects as empty columns",
    )
    parser.add_argument("--delimiter", default=None, help="CSV field delimiter (default: ,)")
    parser.add_argument(
        "--format",
        choices=list(INPUT_FORMATS),
        default=None,
        help="stream: concatenated JSON objects; array: one JSON array of objects",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Convert JSON objects to CSV rows.")
    _add_args(parser)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    overrides = {
        "key_separator": args.key_separator,
        "array_formatting": args.array_formatting,
        "array_start": args.array_start,
        "array_end": args.array_end,
        "preserve_empty_arrays": args.preserve_empty_arrays,
        "preserve_empty_objects": args.preserve_empty_objects,
        "delimiter": args.delimiter,
        "format": args.format,
    }

    try:
        cfg = load_config(args.config) if args.config is not None else {}
        settings = build_settings(cfg, overrides)
        if args.input == "-":
            text, count = _convert(settings, sys.stdin.buffer)
        else:
            with open(args.input, "rb") as handle:
                text, count = _convert(settings, handle)
    except (Json2CsvError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.output == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        output = Path(args.output)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            with output.open("w", newline="", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as exc:
            print(f"ERROR: failed to write {output}: {exc}", file=sys.stderr)
            return 1

    logger.info("wrote %d row(s) to %s", count, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
