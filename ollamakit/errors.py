"""Exceptions raised by the client and its helpers."""

from __future__ import annotations

import json
from typing import Any


class OllamaError(Exception):
    """Base class for every error raised by this package."""

    default_message = "Ollama error"

    def __init__(self, detail: Any = None) -> None:
        self.detail = detail
        super().__init__(self._format(detail))

    def _format(self, detail: Any) -> str:
        if detail is None:
            return self.default_message
        return f"{self.default_message}: {detail}"


class ToolCallError(OllamaError):
    """A tool requested by the model could not be called."""

    default_message = "Error calling tool"


class UnknownToolNameError(ToolCallError):
    """The model asked for a tool that was never registered."""

    default_message = "Ollama attempted to call a tool with a name we do not recognize"


class InvalidToolArgumentsError(ToolCallError):
    """The arguments sent by the model do not fit the tool's parameters."""

    default_message = (
        "Could not convert tool arguments from Ollama into what the tool expected, "
        "or vice versa"
    )


class InternalToolError(ToolCallError):
    """The tool itself failed while running."""

    default_message = "Tool errored internally when it was called"


class JsonError(OllamaError):
    """A payload could not be encoded or decoded as expected."""

    default_message = "Ollama JSON error"


class RequestError(OllamaError):
    """The HTTP request to the server failed."""

    default_message = "HTTP request error"


class InternalError(OllamaError):
    """An error reported by the server in an ``{"error": ...}`` payload."""

    default_message = "Internal Ollama error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def _format(self, detail: Any) -> str:
        return f"{self.default_message}: {detail}"

    @classmethod
    def from_payload(cls, payload: str | bytes | bytearray | dict[str, Any]) -> InternalError:
        """Build the error from a server payload; raise JsonError if it is not one."""
        data: Any = payload
        if isinstance(payload, (bytes, bytearray)):
            try:
                data = payload.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise JsonError(str(exc)) from exc
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise JsonError(str(exc)) from exc
        if not isinstance(data, dict) or not isinstance(data.get("error"), str):
            raise JsonError("missing field `error`")
        return cls(data["error"])


class OtherError(OllamaError):
    """Any other failure, carrying the text the server sent back."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def _format(self, detail: Any) -> str:
        return str(detail)