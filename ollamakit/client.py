"""Asynchronous client for an Ollama server."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, AsyncIterator, Callable, Mapping, TypeVar
from urllib.parse import urlsplit, urlunsplit

import httpx

from .chat_request import ChatMessageRequest
from .completion import GenerationRequest, GenerationResponse
from .embeddings import GenerateEmbeddingsRequest, GenerateEmbeddingsResponse
from .errors import JsonError, OllamaError, OtherError, RequestError
from .messages import (
    ChatHistory,
    ChatMessage,
    ChatMessageResponse,
    history_messages,
    history_push,
)

DEFAULT_URL = "http://127.0.0.1:11434"

_log = logging.getLogger(__name__)

T = TypeVar("T")


def _normalize_url(url: str) -> str:
    if not isinstance(url, str):
        raise TypeError("the server URL must be a string")
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc or not parts.hostname:
        raise ValueError(f"invalid server URL {url!r}")
    try:
        parts.port
    except ValueError as exc:
        raise ValueError(f"invalid port in server URL {url!r}") from exc
    path = parts.path if parts.path.endswith("/") else parts.path + "/"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def _with_port(url: str, port: int) -> str:
    if isinstance(port, bool) or not isinstance(port, int):
        raise TypeError("port must be an integer")
    if not 0 <= port <= 65535:
        raise ValueError("port must be between 0 and 65535")
    parts = urlsplit(_normalize_url(url))
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    userinfo = ""
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo += f":{parts.password}"
        userinfo += "@"
    netloc = f"{userinfo}{host}:{port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


async def _parse_stream(
    lines: AsyncIterator[str], parse: Callable[[Any], T]
) -> AsyncIterator[T]:
    async for line in lines:
        try:
            yield parse(json.loads(line))
        except (ValueError, OllamaError) as exc:
            _log.warning("Failed to deserialize response: %s", exc)


async def _response_lines(response: httpx.Response) -> AsyncIterator[str]:
    try:
        async for line in response.aiter_lines():
            line = line.strip()
            if line:
                yield line
    except httpx.HTTPError as exc:
        raise RequestError(f"Failed to read response: {exc}") from exc
    finally:
        await response.aclose()


async def _record_reply(
    history: ChatHistory | list[ChatMessage],
    stream: AsyncIterator[ChatMessageResponse],
) -> AsyncIterator[ChatMessageResponse]:
    parts: list[str] = []
    async for item in stream:
        if item.done:
            history_push(history, ChatMessage.assistant("".join(parts)))
        else:
            parts.append(item.message.content)
        yield item


class Ollama:
    """A connection to an Ollama server; use it as an async context manager."""

    def __init__(
        self,
        url: str = DEFAULT_URL,
        *,
        headers: Mapping[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = _normalize_url(url)
        self._headers = httpx.Headers(dict(headers or {}))
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=None)

    @classmethod
    def from_host_port(
        cls,
        host: str,
        port: int,
        *,
        headers: Mapping[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> Ollama:
        """Connect to ``host`` (a URL such as ``http://localhost``) on ``port``."""
        return cls(_with_port(host, port), headers=headers, client=client)

    @property
    def url(self) -> str:
        """The base URL of the server, ending in a slash."""
        return self._url

    @property
    def uri(self) -> str:
        """The host part of the server URL."""
        host = urlsplit(self._url).hostname or ""
        return f"[{host}]" if ":" in host else host

    @property
    def headers(self) -> httpx.Headers:
        return httpx.Headers(self._headers)

    def set_headers(self, headers: Mapping[str, str] | None) -> None:
        """Replace the headers sent with every request; None clears them."""
        self._headers = httpx.Headers(dict(headers or {}))

    def __repr__(self) -> str:
        return f"Ollama({self._url!r})"

    def _endpoint(self, path: str) -> str:
        return self._url + path.lstrip("/")

    async def request(self, method: str, path: str, payload: Any = None) -> Any:
        """Send one request and return the decoded JSON body, or None if it is empty."""
        try:
            response = await self._client.request(
                method, self._endpoint(path), json=payload, headers=self._headers
            )
        except httpx.HTTPError as exc:
            raise RequestError(str(exc)) from exc
        if not response.is_success:
            raise OtherError(response.text)
        if not response.content:
            return None
        try:
            return json.loads(response.content)
        except (ValueError, UnicodeDecodeError) as exc:
            raise JsonError(str(exc)) from exc

    async def stream_lines(
        self, method: str, path: str, payload: Any = None
    ) -> AsyncIterator[str]:
        """Send a request and return an iterator over the non-empty lines of the reply.

        The status is checked before returning, so a refused request raises here.
        """
        built = self._client.build_request(
            method, self._endpoint(path), json=payload, headers=self._headers
        )
        try:
            response = await self._client.send(built, stream=True)
        except httpx.HTTPError as exc:
            raise RequestError(str(exc)) from exc
        if not response.is_success:
            try:
                body = (await response.aread()).decode("utf-8", "replace")
            except httpx.HTTPError as exc:
                body = str(exc)
            finally:
                await response.aclose()
            raise OtherError(body)
        return _response_lines(response)

    async def send_chat_messages(self, request: ChatMessageRequest) -> ChatMessageResponse:
        data = await self.request("POST", "api/chat", request.to_dict(stream=False))
        return ChatMessageResponse.from_dict(data)

    async def send_chat_messages_stream(
        self, request: ChatMessageRequest
    ) -> AsyncIterator[ChatMessageResponse]:
        """Stream the reply piece by piece; lines that cannot be read are skipped."""
        lines = await self.stream_lines("POST", "api/chat", request.to_dict(stream=True))
        return _parse_stream(lines, ChatMessageResponse.from_dict)

    async def send_chat_messages_with_history(
        self,
        history: ChatHistory | list[ChatMessage],
        request: ChatMessageRequest,
    ) -> ChatMessageResponse:
        """Add the request's messages to the history, send it all, and record the reply."""
        for message in request.messages:
            history_push(history, message)
        full = replace(request, messages=history_messages(history))
        response = await self.send_chat_messages(full)
        history_push(history, response.message)
        return response

    async def send_chat_messages_with_history_stream(
        self,
        history: ChatHistory | list[ChatMessage],
        request: ChatMessageRequest,
    ) -> AsyncIterator[ChatMessageResponse]:
        """Like the non-streaming form; the reply is recorded when the last piece arrives."""
        for message in request.messages:
            history_push(history, message)
        full = replace(request, messages=history_messages(history))
        stream = await self.send_chat_messages_stream(full)
        return _record_reply(history, stream)

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        data = await self.request("POST", "api/generate", request.to_dict(stream=False))
        return GenerationResponse.from_dict(data)

    async def generate_stream(
        self, request: GenerationRequest
    ) -> AsyncIterator[GenerationResponse]:
        """Stream the completion; lines that cannot be read are skipped."""
        lines = await self.stream_lines("POST", "api/generate", request.to_dict(stream=True))
        return _parse_stream(lines, GenerationResponse.from_dict)

    async def generate_embeddings(
        self, request: GenerateEmbeddingsRequest
    ) -> GenerateEmbeddingsResponse:
        data = await self.request("POST", "api/embed", request.to_dict())
        return GenerateEmbeddingsResponse.from_dict(data)

    async def aclose(self) -> None:
        """Close the HTTP client if this object created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Ollama:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()