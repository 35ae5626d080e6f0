from typing import Any

import pytest
from pydantic import BaseModel

from ollamakit.parameters import (
    DRAFT_07,
    FormatType,
    JsonStructure,
    KeepAlive,
    TimeUnit,
    inline_refs,
)


class Inner(BaseModel):
    value: int


class Outer(BaseModel):
    name: str
    inner: Inner
    items: list[Inner]


def _has_ref(node: Any) -> bool:
    if isinstance(node, dict):
        return "$ref" in node or any(_has_ref(v) for v in node.values())
    if isinstance(node, list):
        return any(_has_ref(v) for v in node)
    return False


def test_json_format():
    assert FormatType.json().to_json() == "json"


def test_structured_format_serializes_schema():
    schema = {"type": "object", "properties": {"a": {"type": "string"}}}
    fmt = FormatType.structured(JsonStructure.for_schema(schema))
    assert fmt.to_json() == schema


def test_for_schema_rejects_non_dict():
    with pytest.raises(TypeError):
        JsonStructure.for_schema(["not", "a", "schema"])


def test_from_model_inlines_references():
    schema = JsonStructure.from_model(Outer).schema
    assert schema["$schema"] == DRAFT_07
    assert "$defs" not in schema
    assert not _has_ref(schema)
    assert "value" in schema["properties"]["inner"]["properties"]
    assert "value" in schema["properties"]["items"]["items"]["properties"]


def test_inline_refs_leaves_input_untouched():
    schema = {
        "$defs": {"A": {"type": "string"}},
        "properties": {"a": {"$ref": "#/$defs/A", "description": "an a"}},
    }
    result = inline_refs(schema)
    assert result["properties"]["a"] == {"type": "string", "description": "an a"}
    assert schema["properties"]["a"]["$ref"] == "#/$defs/A"
    assert "$defs" in schema


def test_inline_refs_recursive_raises():
    schema = {
        "$defs": {"A": {"properties": {"a": {"$ref": "#/$defs/A"}}}},
        "$ref": "#/$defs/A",
    }
    with pytest.raises(ValueError):
        inline_refs(schema)


def test_inline_refs_unknown_raises():
    with pytest.raises(ValueError):
        inline_refs({"properties": {"a": {"$ref": "#/definitions/Missing"}}})


@pytest.mark.parametrize(
    ("unit", "symbol"),
    [(TimeUnit.SECONDS, "s"), (TimeUnit.MINUTES, "m"), (TimeUnit.HOURS, "h")],
)
def test_time_unit_symbol(unit, symbol):
    assert unit.symbol() == symbol


def test_keep_alive_serialization():
    assert KeepAlive.indefinitely().to_json() == -1
    assert KeepAlive.unload_on_completion().to_json() == 0
    assert KeepAlive.until(5, TimeUnit.MINUTES).to_json() == "5m"


def test_keep_alive_rejects_negative_time():
    with pytest.raises(ValueError):
        KeepAlive.until(-1, TimeUnit.SECONDS)


def test_keep_alive_requires_unit_with_time():
    with pytest.raises(ValueError):
        KeepAlive(time=3)