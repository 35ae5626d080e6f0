"""Chat messages, chat responses and chat history."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Iterable, Iterator

from .errors import JsonError
from .images import Image
from .tools import ToolCall


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


def _require(data: Any, key: str, kind: type, owner: str) -> Any:
    if not isinstance(data, dict):
        raise JsonError(f"{owner} must be a JSON object")
    if key not in data:
        raise JsonError(f"missing field `{key}` in {owner}")
    value = data[key]
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise JsonError(f"field `{key}` in {owner} has the wrong type")
    if kind is int and value < 0:
        raise JsonError(f"field `{key}` in {owner} must not be negative")
    return value


@dataclass
class ChatMessage:
    role: MessageRole
    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    images: list[Image] | None = None

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(MessageRole.USER, content)

    @classmethod
    def assistant(cls, content: str) -> ChatMessage:
        return cls(MessageRole.ASSISTANT, content)

    @classmethod
    def system(cls, content: str) -> ChatMessage:
        return cls(MessageRole.SYSTEM, content)

    @classmethod
    def tool(cls, content: str) -> ChatMessage:
        return cls(MessageRole.TOOL, content)

    def with_images(self, images: Iterable[Image]) -> ChatMessage:
        """A copy of the message carrying exactly these images."""
        return replace(self, tool_calls=list(self.tool_calls), images=list(images))

    def add_image(self, image: Image) -> ChatMessage:
        """A copy of the message with one more image."""
        return self.with_images([*(self.images or ()), image])

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "role": self.role.value,
            "content": self.content,
            "tool_calls": [call.to_dict() for call in self.tool_calls],
        }
        if self.images is not None:
            data["images"] = [image.to_base64() for image in self.images]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatMessage:
        raw_role = _require(data, "role", str, "ChatMessage")
        try:
            role = MessageRole(raw_role)
        except ValueError as exc:
            raise JsonError(f"unknown message role {raw_role!r}") from exc
        content = _require(data, "content", str, "ChatMessage")
        raw_calls = data.get("tool_calls") or []
        raw_images = data.get("images")
        if not isinstance(raw_calls, list):
            raise JsonError("field `tool_calls` in ChatMessage has the wrong type")
        if raw_images is not None and (
            not isinstance(raw_images, list) or not all(isinstance(i, str) for i in raw_images)
        ):
            raise JsonError("field `images` in ChatMessage has the wrong type")
        return cls(
            role=role,
            content=content,
            tool_calls=[ToolCall.from_dict(call) for call in raw_calls],
            images=None if raw_images is None else [Image(i) for i in raw_images],
        )


@dataclass
class ChatMessageFinalResponseData:
    """Statistics sent with the last response of a chat; durations in nanoseconds."""

    total_duration: int
    load_duration: int
    prompt_eval_count: int
    prompt_eval_duration: int
    eval_count: int
    eval_duration: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatMessageFinalResponseData:
        return cls(
            **{
                spec.name: _require(data, spec.name, int, "ChatMessageFinalResponseData")
                for spec in fields(cls)
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return {spec.name: getattr(self, spec.name) for spec in fields(self)}


@dataclass
class ChatMessageResponse:
    model: str
    created_at: str
    message: ChatMessage
    done: bool
    final_data: ChatMessageFinalResponseData | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatMessageResponse:
        model = _require(data, "model", str, "ChatMessageResponse")
        created_at = _require(data, "created_at", str, "ChatMessageResponse")
        message = ChatMessage.from_dict(_require(data, "message", dict, "ChatMessageResponse"))
        done = _require(data, "done", bool, "ChatMessageResponse")
        try:
            final_data: ChatMessageFinalResponseData | None = (
                ChatMessageFinalResponseData.from_dict(data)
            )
        except JsonError:
            final_data = None
        return cls(model, created_at, message, done, final_data)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "model": self.model,
            "created_at": self.created_at,
            "message": self.message.to_dict(),
            "done": self.done,
        }
        if self.final_data is not None:
            data.update(self.final_data.to_dict())
        return data


class ChatHistory:
    """An ordered store of chat messages; subclass it to keep them elsewhere."""

    def __init__(self, messages: Iterable[ChatMessage] | None = None) -> None:
        self._messages: list[ChatMessage] = list(messages or ())

    def push(self, message: ChatMessage) -> None:
        self._messages.append(message)

    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages())


def history_push(history: ChatHistory | list[ChatMessage], message: ChatMessage) -> None:
    """Add a message to a history object or to a plain list."""
    if isinstance(history, list):
        history.append(message)
    else:
        history.push(message)


def history_messages(history: ChatHistory | list[ChatMessage]) -> list[ChatMessage]:
    """A copy of the messages held by a history object or a plain list."""
    if isinstance(history, list):
        return list(history)
    return list(history.messages())