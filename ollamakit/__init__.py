"""Asyncio client for the Ollama API: chat, completion, embeddings, structured output and tools."""

__version__ = "0.3.0"