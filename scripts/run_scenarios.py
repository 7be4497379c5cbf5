"""Run scenario definitions and write outputs to out/scenarios."""

from __future__ import annotations

import io
from pathlib import Path

from json_objects_to_csv.converter import Json2Csv
from json_objects_to_csv.csv_io import sink_to_string
from json_objects_to_csv.scenarios import get_scenarios


def main() -> None:
    out_dir = Path("out/scenarios")
    out_dir.mkdir(parents=True, exist_ok=True)

    for scenario in get_scenarios():
        scenario_dir = out_dir / scenario.name
        scenario_dir.mkdir(parents=True, exist_ok=True)

        input_path = scenario_dir / "input.json"
        input_path.write_text(scenario.source + "\n", encoding="utf-8")

        sink, buffer = sink_to_string(scenario.delimiter)
        Json2Csv(scenario.config).convert_from_reader(io.StringIO(scenario.source), sink)

        output_path = scenario_dir / "output.csv"
        output_path.write_text(buffer.getvalue(), encoding="utf-8")

        print(f"{scenario.name}: wrote {output_path}")


if __name__ == "__main__":
    main()
