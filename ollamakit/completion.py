"""Requests and responses for the completion endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from .errors import JsonError
from .images import Image
from .options import ModelOptions
from .parameters import FormatType, KeepAlive

_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1
_STAT_FIELDS = (
    "total_duration",
    "load_duration",
    "prompt_eval_count",
    "prompt_eval_duration",
    "eval_count",
    "eval_duration",
)


@dataclass(frozen=True)
class GenerationContext:
    """The encoded conversation returned by a completion.

    Send it with the next request to keep a short conversational memory.
    """

    tokens: tuple[int, ...]

    def __post_init__(self) -> None:
        tokens = tuple(self.tokens)
        for token in tokens:
            if isinstance(token, bool) or not isinstance(token, int):
                raise TypeError("context tokens must be integers")
            if not _I32_MIN <= token <= _I32_MAX:
                raise ValueError("context tokens must fit in 32 bits")
        object.__setattr__(self, "tokens", tokens)


@dataclass
class GenerationRequest:
    """A completion request for a model and a prompt."""

    model_name: str
    prompt: str
    suffix: str | None = None
    images: list[Image] = field(default_factory=list)
    options: ModelOptions | None = None
    system: str | None = None
    template: str | None = None
    context: GenerationContext | None = None
    format: FormatType | None = None
    keep_alive: KeepAlive | None = None

    def __post_init__(self) -> None:
        self.images = list(self.images)

    @classmethod
    def with_suffix(cls, model_name: str, prompt: str, suffix: str) -> GenerationRequest:
        """A request with text after the model's answer, as used for code completion."""
        return cls(model_name, prompt, suffix=suffix)

    def add_image(self, image: Image) -> GenerationRequest:
        """A copy of the request with one more image."""
        return replace(self, images=[*self.images, image])

    def to_dict(self, stream: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {"model": self.model_name, "prompt": self.prompt}
        if self.suffix is not None:
            data["suffix"] = self.suffix
        data["images"] = [image.to_base64() for image in self.images]
        if self.options is not None:
            data["options"] = self.options.to_dict()
        if self.system is not None:
            data["system"] = self.system
        if self.template is not None:
            data["template"] = self.template
        if self.context is not None:
            data["context"] = list(self.context.tokens)
        if self.format is not None:
            data["format"] = self.format.to_json()
        if self.keep_alive is not None:
            data["keep_alive"] = self.keep_alive.to_json()
        data["stream"] = stream
        return data


def _require(data: Any, key: str, kind: type) -> Any:
    if not isinstance(data, dict):
        raise JsonError("GenerationResponse must be a JSON object")
    if key not in data:
        raise JsonError(f"missing field `{key}` in GenerationResponse")
    value = data[key]
    if not isinstance(value, kind):
        raise JsonError(f"field `{key}` in GenerationResponse has the wrong type")
    return value


def _optional_count(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise JsonError(f"field `{key}` in GenerationResponse must be a non-negative integer")
    return value


def _optional_context(data: dict[str, Any]) -> GenerationContext | None:
    value = data.get("context")
    if value is None:
        return None
    if not isinstance(value, list):
        raise JsonError("field `context` in GenerationResponse has the wrong type")
    try:
        return GenerationContext(tuple(value))
    except (TypeError, ValueError) as exc:
        raise JsonError(str(exc)) from exc


@dataclass
class GenerationResponse:
    """A completion, or one piece of it when streaming; durations in nanoseconds."""

    model: str
    created_at: str
    response: str
    done: bool
    context: GenerationContext | None = None
    total_duration: int | None = None
    load_duration: int | None = None
    prompt_eval_count: int | None = None
    prompt_eval_duration: int | None = None
    eval_count: int | None = None
    eval_duration: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenerationResponse:
        model = _require(data, "model", str)
        created_at = _require(data, "created_at", str)
        response = _require(data, "response", str)
        done = _require(data, "done", bool)
        stats = {name: _optional_count(data, name) for name in _STAT_FIELDS}
        return cls(model, created_at, response, done, _optional_context(data), **stats)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "model": self.model,
            "created_at": self.created_at,
            "response": self.response,
            "done": self.done,
            "context": None if self.context is None else list(self.context.tokens),
        }
        data.update({name: getattr(self, name) for name in _STAT_FIELDS})
        return data