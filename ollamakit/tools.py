"""Tools the model may call, and the messages that describe them."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from .errors import InternalToolError, InvalidToolArgumentsError, JsonError, ToolCallError
from .parameters import JsonStructure


def parameters_schema(model: Any) -> dict[str, Any]:
    """The draft-07 schema, references inlined, describing a tool's parameters."""
    return JsonStructure.from_model(model).schema


class Tool(abc.ABC):
    """A function the model can call.

    Subclasses set ``name``, ``description`` and ``Params`` (a pydantic model,
    ideally with a description on every field) and implement ``call``. Raising
    from ``call`` aborts the conversation; to let the model handle a failure,
    return it as text instead.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    Params: ClassVar[type[BaseModel]]

    @abc.abstractmethod
    async def call(self, params: Any) -> str:
        """Run the tool with validated parameters and return its result as text."""

    async def invoke(self, arguments: Any) -> str:
        """Validate raw JSON arguments against ``Params`` and call the tool."""
        try:
            params = self.Params.model_validate(arguments)
        except ValidationError as exc:
            raise InvalidToolArgumentsError(str(exc)) from exc
        try:
            result = await self.call(params)
        except ToolCallError:
            raise
        except Exception as exc:
            raise InternalToolError(str(exc)) from exc
        if not isinstance(result, str):
            raise InternalToolError(f"tool returned {type(result).__name__}, not text")
        return result


class ToolType(Enum):
    FUNCTION = "Function"

    @classmethod
    def _missing_(cls, value: object) -> ToolType | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


def _require(data: Any, key: str, kind: type, owner: str) -> Any:
    if not isinstance(data, dict):
        raise JsonError(f"{owner} must be a JSON object")
    if key not in data:
        raise JsonError(f"missing field `{key}` in {owner}")
    value = data[key]
    if kind is not object and not isinstance(value, kind):
        raise JsonError(f"field `{key}` in {owner} has the wrong type")
    return value


@dataclass
class ToolFunctionInfo:
    name: str
    description: str
    parameters: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "parameters": self.parameters}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolFunctionInfo:
        return cls(
            name=_require(data, "name", str, "ToolFunctionInfo"),
            description=_require(data, "description", str, "ToolFunctionInfo"),
            parameters=_require(data, "parameters", dict, "ToolFunctionInfo"),
        )


@dataclass
class ToolInfo:
    """The description of a tool sent to the model."""

    tool_type: ToolType
    function: ToolFunctionInfo

    @classmethod
    def from_tool(cls, tool: Tool | type[Tool]) -> ToolInfo:
        return cls(
            tool_type=ToolType.FUNCTION,
            function=ToolFunctionInfo(
                name=tool.name,
                description=tool.description,
                parameters=parameters_schema(tool.Params),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.tool_type.value, "function": self.function.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolInfo:
        raw_type = _require(data, "type", str, "ToolInfo")
        try:
            tool_type = ToolType(raw_type)
        except ValueError as exc:
            raise JsonError(f"unknown tool type {raw_type!r}") from exc
        return cls(
            tool_type=tool_type,
            function=ToolFunctionInfo.from_dict(_require(data, "function", dict, "ToolInfo")),
        )


@dataclass
class ToolCallFunction:
    name: str
    arguments: Any

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolCallFunction:
        return cls(
            name=_require(data, "name", str, "ToolCallFunction"),
            arguments=_require(data, "arguments", object, "ToolCallFunction"),
        )


@dataclass
class ToolCall:
    """A request from the model to call one of the tools."""

    function: ToolCallFunction

    def to_dict(self) -> dict[str, Any]:
        return {"function": self.function.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolCall:
        return cls(ToolCallFunction.from_dict(_require(data, "function", dict, "ToolCall")))