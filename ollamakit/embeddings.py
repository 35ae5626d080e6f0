"""Requests and responses for the embeddings endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from .errors import JsonError
from .options import ModelOptions
from .parameters import KeepAlive


@dataclass
class GenerateEmbeddingsRequest:
    """Embeddings for one text, or for several texts at once."""

    model_name: str
    input: str | list[str] = ""
    truncate: bool | None = None
    options: ModelOptions | None = None
    keep_alive: KeepAlive | None = None

    def __post_init__(self) -> None:
        if isinstance(self.input, str):
            return
        if isinstance(self.input, (bytes, bytearray)):
            raise TypeError("embeddings input must be text or a sequence of texts")
        texts = list(self.input)
        if not all(isinstance(text, str) for text in texts):
            raise TypeError("embeddings input must be text or a sequence of texts")
        self.input = texts

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "model": self.model_name,
            "input": self.input if isinstance(self.input, str) else list(self.input),
        }
        if self.truncate is not None:
            data["truncate"] = self.truncate
        if self.options is not None:
            data["options"] = self.options.to_dict()
        if self.keep_alive is not None:
            data["keep_alive"] = self.keep_alive.to_json()
        return data


@dataclass
class GenerateEmbeddingsResponse:
    """One embedding vector per input text."""

    embeddings: list[list[float]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenerateEmbeddingsResponse:
        if not isinstance(data, dict):
            raise JsonError("GenerateEmbeddingsResponse must be a JSON object")
        if "embeddings" not in data:
            raise JsonError("missing field `embeddings` in GenerateEmbeddingsResponse")
        raw = data["embeddings"]
        if not isinstance(raw, list):
            raise JsonError("field `embeddings` has the wrong type")
        vectors: list[list[float]] = []
        for vector in raw:
            if not isinstance(vector, list) or not all(_is_number(x) for x in vector):
                raise JsonError("each embedding must be a list of numbers")
            vectors.append([float(x) for x in vector])
        return cls(vectors)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _texts(values: Sequence[str]) -> list[str]:
    return list(values)