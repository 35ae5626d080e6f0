"""Response formats, JSON schema helpers and keep-alive settings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import TypeAdapter

DRAFT_07 = "http://json-schema.org/draft-07/schema#"

_DEF_KEYS = ("$defs", "definitions")
_REF_PREFIXES = ("#/$defs/", "#/definitions/")


def _local_ref_name(ref: str) -> str | None:
    for prefix in _REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return None


def inline_refs(schema: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``schema`` with every local ``$ref`` replaced by its definition.

    The server does not follow references, so they are expanded in place and the
    definition tables are dropped. Recursive or unknown references raise ValueError.
    """
    definitions: dict[str, Any] = {}
    for key in _DEF_KEYS:
        definitions.update(schema.get(key) or {})

    def resolve(node: Any, active: frozenset[str]) -> Any:
        if isinstance(node, list):
            return [resolve(item, active) for item in node]
        if not isinstance(node, dict):
            return node
        ref = node.get("$ref")
        name = _local_ref_name(ref) if isinstance(ref, str) else None
        if name is None:
            return {key: resolve(value, active) for key, value in node.items()}
        if name in active:
            raise ValueError(f"recursive schema reference {ref!r} cannot be inlined")
        if name not in definitions:
            raise ValueError(f"unknown schema reference {ref!r}")
        target = resolve(definitions[name], active | {name})
        extra = {key: resolve(value, active) for key, value in node.items() if key != "$ref"}
        return {**target, **extra}

    body = {key: value for key, value in schema.items() if key not in _DEF_KEYS}
    return resolve(body, frozenset())


@dataclass(frozen=True)
class JsonStructure:
    """A JSON schema the response must follow."""

    schema: dict[str, Any]

    @classmethod
    def from_model(cls, model: Any) -> JsonStructure:
        """Build a draft-07 schema, with references inlined, for a type or pydantic model."""
        schema = inline_refs(TypeAdapter(model).json_schema())
        return cls({"$schema": DRAFT_07, **schema})

    @classmethod
    def for_schema(cls, schema: dict[str, Any]) -> JsonStructure:
        """Wrap an existing schema as it is."""
        if not isinstance(schema, dict):
            raise TypeError("a JSON schema must be a dict")
        return cls(schema)


@dataclass(frozen=True)
class FormatType:
    """The format to return a response in: plain JSON or a structured schema."""

    structure: JsonStructure | None = None

    @classmethod
    def json(cls) -> FormatType:
        return cls()

    @classmethod
    def structured(cls, structure: JsonStructure) -> FormatType:
        """Structured output; requires a server of version 0.5.0 or later."""
        return cls(structure)

    def to_json(self) -> Any:
        if self.structure is None:
            return "json"
        return self.structure.schema


class TimeUnit(Enum):
    SECONDS = "s"
    MINUTES = "m"
    HOURS = "h"

    def symbol(self) -> str:
        return self.value


@dataclass(frozen=True)
class KeepAlive:
    """How long a model stays loaded after a request.

    The server unloads models after five minutes of inactivity unless told otherwise.
    """

    time: int | None = None
    unit: TimeUnit | None = None
    forever: bool = False

    def __post_init__(self) -> None:
        if (self.time is None) != (self.unit is None):
            raise ValueError("time and unit must be given together")
        if self.forever and self.time is not None:
            raise ValueError("an indefinite keep-alive has no duration")
        if self.time is not None:
            if isinstance(self.time, bool) or not isinstance(self.time, int):
                raise TypeError("keep-alive time must be an integer")
            if self.time < 0:
                raise ValueError("keep-alive time must not be negative")
            if not isinstance(self.unit, TimeUnit):
                raise TypeError("keep-alive unit must be a TimeUnit")

    @classmethod
    def indefinitely(cls) -> KeepAlive:
        return cls(forever=True)

    @classmethod
    def unload_on_completion(cls) -> KeepAlive:
        return cls()

    @classmethod
    def until(cls, time: int, unit: TimeUnit) -> KeepAlive:
        return cls(time=time, unit=unit)

    def to_json(self) -> int | str:
        if self.forever:
            return -1
        if self.time is None or self.unit is None:
            return 0
        return f"{self.time}{self.unit.symbol()}"