from __future__ import annotations

from pydantic import BaseModel, Field

from ollamakit.chat_request import ChatMessageRequest
from ollamakit.messages import ChatMessage
from ollamakit.options import ModelOptions
from ollamakit.parameters import FormatType, JsonStructure, KeepAlive
from ollamakit.tools import Tool, ToolInfo


class _EchoParams(BaseModel):
    text: str = Field(description="Text to echo")


class _Echo(Tool):
    name = "echo"
    description = "Echo the text back."
    Params = _EchoParams

    async def call(self, params):
        return params.text


def test_minimal_request():
    message = ChatMessage.user("Why is the sky blue?")
    data = ChatMessageRequest("llama2:latest", [message]).to_dict()
    assert data == {
        "model": "llama2:latest",
        "messages": [message.to_dict()],
        "stream": False,
    }


def test_stream_flag():
    request = ChatMessageRequest("m", [])
    assert request.to_dict(stream=True)["stream"] is True
    assert request.to_dict()["stream"] is False


def test_messages_order_kept():
    messages = (ChatMessage.system("be brief"), ChatMessage.user("hi"))
    request = ChatMessageRequest("m", messages)
    assert request.messages == list(messages)
    roles = [m["role"] for m in request.to_dict()["messages"]]
    assert roles == ["system", "user"]


def test_options_and_template():
    options = ModelOptions(temperature=0.2, top_k=25)
    data = ChatMessageRequest("m", [], options=options, template="T").to_dict()
    assert data["options"] == options.to_dict()
    assert data["template"] == "T"


def test_format_json_and_structured():
    assert ChatMessageRequest("m", [], format=FormatType.json()).to_dict()["format"] == "json"
    schema = {"type": "object", "properties": {"a": {"type": "string"}}}
    structured = FormatType.structured(JsonStructure.for_schema(schema))
    assert ChatMessageRequest("m", [], format=structured).to_dict()["format"] == schema


def test_keep_alive():
    data = ChatMessageRequest("m", [], keep_alive=KeepAlive.indefinitely()).to_dict()
    assert data["keep_alive"] == -1
    data = ChatMessageRequest("m", [], keep_alive=KeepAlive.unload_on_completion()).to_dict()
    assert data["keep_alive"] == 0


def test_tools_included_only_when_present():
    assert "tools" not in ChatMessageRequest("m", []).to_dict()
    info = ToolInfo.from_tool(_Echo)
    data = ChatMessageRequest("m", [], tools=[info]).to_dict()
    assert data["tools"] == [info.to_dict()]
    assert data["tools"][0]["function"]["name"] == "echo"


def test_unset_fields_left_out():
    data = ChatMessageRequest("m", []).to_dict()
    for key in ("options", "template", "format", "keep_alive", "tools"):
        assert key not in data