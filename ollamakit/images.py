"""Images attached to prompts and chat messages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Image:
    """An image held as base64 text, as the server expects it."""

    data: str

    @classmethod
    def from_base64(cls, data: str | bytes) -> Image:
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("ascii")
        if not isinstance(data, str):
            raise TypeError("image data must be base64 text")
        return cls(data)

    def to_base64(self) -> str:
        return self.data