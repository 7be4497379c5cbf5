"""Scenario definitions for JSON objects to CSV conversion.

Each scenario pairs an input (concatenated JSON documents), a flattening
configuration and the CSV lines it is expected to produce.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from .flattener import ArrayFormatting, FlattenerConfig


@dataclass(frozen=True)
class Scenario:
    """A named conversion example.

    Attributes
    ----------
    name : str
        Unique identifier for the scenario.
    description : str
        Human-readable description of what the scenario shows.
    source : str
        JSON documents, one after the other.
    expected : Sequence[str]
        Expected CSV lines, without terminators.
    config : FlattenerConfig, optional
        Flattening policy (default: ``FlattenerConfig()``).
    delimiter : str, optional
        CSV field delimiter (default: ",").
    """
    name: str
    description: str
    source: str
    expected: Sequence[str]
    config: FlattenerConfig = field(default_factory=FlattenerConfig)
    delimiter: str = ","


def get_scenarios() -> List[Scenario]:
    """Get all available conversion scenarios.

    Returns
    -------
    List[Scenario]
        Scenario definitions covering nesting, arrays and empty containers.
    """
    preserve = FlattenerConfig().with_preserve_empty_arrays(True).with_preserve_empty_objects(True)
    return [
        Scenario(
            name="nested_and_arrays",
            description="Nested objects and arrays with plain index formatting.",
            source='{"a": {"b": 1}} {"c": [2]} {"d": []} {"e": {}}',
            expected=["a.b,c.0", "1,", ",2", ",", ","],
        ),
        Scenario(
            name="surrounded_indices",
            description="Array indices wrapped in brackets.",
            source='{"a": {"b": 1}} {"c": [2]} {"d": []} {"e": {}}',
            expected=["a.b,c[0]", "1,", ",2", ",", ","],
            config=FlattenerConfig().with_array_formatting(ArrayFormatting.surrounded("[", "]")),
        ),
        Scenario(
            name="preserved_empty_containers",
            description="Empty arrays and objects kept as empty columns, semicolon delimited.",
            source='{"a": {"b": 1}} {"c": [2]} {"d": []} {"e": {}}',
            expected=["a.b;c.0;d;e", "1;;;", ";2;;", ";;;", ";;;"],
            config=preserve,
            delimiter=";",
        ),
        Scenario(
            name="reordered_keys",
            description="Headers are sorted regardless of key order in each object.",
            source='{"b": 3, "a": 1, "c": 0}\n{"a": 4, "b": 2}',
            expected=["a,b,c", "1,3,0", "4,2,"],
        ),
        Scenario(
            name="mixed_scalars",
            description="Strings, numbers, booleans and nulls rendered as text.",
            source='{"id": 7, "score": 9.5, "ok": true, "note": null, "name": "x, y"}',
            expected=["id,name,note,ok,score", '7,"x, y",,true,9.5'],
        ),
        Scenario(
            name="custom_separator",
            description="Nested keys joined with an underscore.",
            source='{"order": {"id": 42, "tags": ["new", "vip"]}}',
            expected=["order_id,order_tags_0,order_tags_1", "42,new,vip"],
            config=FlattenerConfig().with_key_separator("_"),
        ),
    ]
