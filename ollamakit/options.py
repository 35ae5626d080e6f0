"""Model options and model descriptions."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any

from .errors import JsonError

_U8 = (0, 2**8 - 1)
_U32 = (0, 2**32 - 1)
_U64 = (0, 2**64 - 1)
_I32 = (-(2**31), 2**31 - 1)

_INT_LIMITS: dict[str, tuple[int, int]] = {
    "mirostat": _U8,
    "num_ctx": _U64,
    "num_gqa": _U32,
    "num_gpu": _U32,
    "num_thread": _U32,
    "repeat_last_n": _I32,
    "seed": _I32,
    "num_predict": _I32,
    "top_k": _U32,
}


@dataclass(frozen=True, kw_only=True)
class ModelOptions:
    """Sampling and runtime options sent with generation requests.

    Unset options are left out so that the model's defaults apply.
    """

    mirostat: int | None = None
    mirostat_eta: float | None = None
    mirostat_tau: float | None = None
    num_ctx: int | None = None
    num_gqa: int | None = None
    num_gpu: int | None = None
    num_thread: int | None = None
    repeat_last_n: int | None = None
    repeat_penalty: float | None = None
    temperature: float | None = None
    seed: int | None = None
    stop: tuple[str, ...] | None = None
    tfs_z: float | None = None
    num_predict: int | None = None
    top_k: int | None = None
    top_p: float | None = None

    def __post_init__(self) -> None:
        for spec in fields(self):
            value = getattr(self, spec.name)
            if value is None:
                continue
            if spec.name == "stop":
                if isinstance(value, str) or not all(isinstance(s, str) for s in value):
                    raise TypeError("stop must be a sequence of strings")
                object.__setattr__(self, "stop", tuple(value))
            elif spec.name in _INT_LIMITS:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise TypeError(f"{spec.name} must be an integer")
                low, high = _INT_LIMITS[spec.name]
                if not low <= value <= high:
                    raise ValueError(f"{spec.name} must be between {low} and {high}")
            else:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise TypeError(f"{spec.name} must be a number")
                object.__setattr__(self, spec.name, float(value))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for spec in fields(self):
            value = getattr(self, spec.name)
            if value is not None:
                result[spec.name] = list(value) if spec.name == "stop" else value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelOptions:
        """Read options from a mapping; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise JsonError("model options must be a JSON object")
        names = {spec.name for spec in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in names and v is not None}
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as exc:
            raise JsonError(str(exc)) from exc

    @classmethod
    def from_json(cls, text: str | bytes) -> ModelOptions:
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise JsonError(str(exc)) from exc
        return cls.from_dict(data)


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


def _optional_str(data: dict[str, Any], key: str, owner: str) -> str:
    if data.get(key) is None:
        return ""
    return _require(data, key, str, owner)


@dataclass
class LocalModel:
    """A model available on the server."""

    name: str
    modified_at: str
    size: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LocalModel:
        return cls(
            name=_require(data, "name", str, "LocalModel"),
            modified_at=_require(data, "modified_at", str, "LocalModel"),
            size=_require(data, "size", int, "LocalModel"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "modified_at": self.modified_at, "size": self.size}


@dataclass
class ModelInfo:
    """Details about a model; fields the model lacks are empty."""

    license: str = ""
    modelfile: str = ""
    parameters: str = ""
    template: str = ""
    model_info: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelInfo:
        if not isinstance(data, dict):
            raise JsonError("ModelInfo must be a JSON object")
        info = data.get("model_info")
        if info is None:
            info = {}
        elif not isinstance(info, dict):
            raise JsonError("field `model_info` in ModelInfo has the wrong type")
        return cls(
            license=_optional_str(data, "license", "ModelInfo"),
            modelfile=_optional_str(data, "modelfile", "ModelInfo"),
            parameters=_optional_str(data, "parameters", "ModelInfo"),
            template=_optional_str(data, "template", "ModelInfo"),
            model_info=dict(info),
        )