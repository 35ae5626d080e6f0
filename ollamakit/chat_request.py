"""Requests for the chat endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .messages import ChatMessage
from .options import ModelOptions
from .parameters import FormatType, KeepAlive
from .tools import ToolInfo


@dataclass
class ChatMessageRequest:
    """A chat request: the model, the conversation so far and optional settings.

    The server requires ``stream`` to be false when tools are given.
    """

    model_name: str
    messages: list[ChatMessage]
    tools: list[ToolInfo] = field(default_factory=list)
    options: ModelOptions | None = None
    template: str | None = None
    format: FormatType | None = None
    keep_alive: KeepAlive | None = None

    def __post_init__(self) -> None:
        self.messages = list(self.messages)
        self.tools = list(self.tools)

    def to_dict(self, stream: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "model": self.model_name,
            "messages": [message.to_dict() for message in self.messages],
        }
        if self.tools:
            data["tools"] = [tool.to_dict() for tool in self.tools]
        if self.options is not None:
            data["options"] = self.options.to_dict()
        if self.template is not None:
            data["template"] = self.template
        if self.format is not None:
            data["format"] = self.format.to_json()
        if self.keep_alive is not None:
            data["keep_alive"] = self.keep_alive.to_json()
        data["stream"] = stream
        return data