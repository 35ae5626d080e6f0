import pytest
from pydantic import BaseModel, Field

from ollamakit.errors import InternalToolError, InvalidToolArgumentsError, JsonError
from ollamakit.parameters import DRAFT_07
from ollamakit.tools import (
    Tool,
    ToolCall,
    ToolCallFunction,
    ToolInfo,
    ToolType,
    parameters_schema,
)


class EchoParams(BaseModel):
    text: str = Field(description="Text to echo")


class Echo(Tool):
    name = "echo"
    description = "Echo the text back"
    Params = EchoParams

    async def call(self, params):
        return params.text


class Broken(Tool):
    name = "broken"
    description = "Always fails"
    Params = EchoParams

    async def call(self, params):
        raise RuntimeError("disk on fire")


class Numeric(Tool):
    name = "numeric"
    description = "Returns a number"
    Params = EchoParams

    async def call(self, params):
        return 42


def test_tool_info_from_tool():
    info = ToolInfo.from_tool(Echo())
    data = info.to_dict()
    assert data["type"] == "Function"
    assert data["function"]["name"] == "echo"
    assert data["function"]["description"] == "Echo the text back"
    params = data["function"]["parameters"]
    assert params["$schema"] == DRAFT_07
    assert params["properties"]["text"]["description"] == "Text to echo"
    assert params["required"] == ["text"]


def test_tool_info_round_trip():
    info = ToolInfo.from_tool(Echo)
    assert ToolInfo.from_dict(info.to_dict()) == info


def test_tool_type_accepts_lower_case():
    assert ToolType("function") is ToolType.FUNCTION


def test_tool_info_rejects_unknown_type():
    data = ToolInfo.from_tool(Echo).to_dict()
    data["type"] = "Procedure"
    with pytest.raises(JsonError):
        ToolInfo.from_dict(data)


def test_parameters_schema_matches_tool_info():
    assert parameters_schema(EchoParams) == ToolInfo.from_tool(Echo).function.parameters


@pytest.mark.asyncio
async def test_invoke_validates_and_calls():
    assert await Tool.invoke(Echo(), {"text": "hello"}) == "hello"


@pytest.mark.asyncio
async def test_invoke_rejects_bad_arguments():
    with pytest.raises(InvalidToolArgumentsError):
        await Tool.invoke(Echo(), {"words": "hello"})


@pytest.mark.asyncio
async def test_invoke_wraps_tool_failure():
    with pytest.raises(InternalToolError) as info:
        await Tool.invoke(Broken(), {"text": "x"})
    assert isinstance(info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_invoke_requires_text_result():
    with pytest.raises(InternalToolError):
        await Tool.invoke(Numeric(), {"text": "x"})


def test_tool_call_round_trip():
    data = {"function": {"name": "get_weather", "arguments": {"city": "Berlin"}}}
    call = ToolCall.from_dict(data)
    assert call == ToolCall(ToolCallFunction("get_weather", {"city": "Berlin"}))
    assert call.to_dict() == data


def test_tool_call_missing_arguments():
    with pytest.raises(JsonError):
        ToolCall.from_dict({"function": {"name": "get_weather"}})