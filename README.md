# ollamakit

An asyncio client for a local or remote Ollama server. It covers chat
(plain, streamed and with a running history), text completion, embeddings,
structured JSON output, keep-alive control and the data types needed to
offer tools to a model. A few ready-made tools are included.

## Installation

```
pip install ollamakit
```

Python 3.10 or newer is required.

## Connecting

`ollamakit.client.Ollama` talks to the server at `http://127.0.0.1:11434`
by default. Pass another base URL, or use `Ollama.from_host_port(host, port)`.
Extra headers can be given with `headers=` or replaced later with
`set_headers`; an existing `httpx.AsyncClient` can be passed with `client=`.
Use the client as an async context manager, or call `aclose()` when done.

## Chat

```python
import asyncio

from ollamakit.client import Ollama
from ollamakit.chat_request import ChatMessageRequest
from ollamakit.messages import ChatMessage


async def main():
    async with Ollama() as ollama:
        request = ChatMessageRequest("llama3.2:latest", [ChatMessage.user("Why is the sky blue?")])
        response = await ollama.send_chat_messages(request)
        print(response.message.content)


asyncio.run(main())
```

`send_chat_messages_stream` returns an async iterator of partial responses:

```python
stream = await ollama.send_chat_messages_stream(request)
async for part in stream:
    print(part.message.content, end="")
```

`send_chat_messages_with_history` keeps a running conversation in a plain
list or a `ChatHistory`: the request's messages are appended to the history,
the whole history is sent, and the reply is appended afterwards.
`send_chat_messages_with_history_stream` does the same while streaming and
records the assembled reply when the last piece arrives.

## Completion

```python
from ollamakit.completion import GenerationRequest
from ollamakit.options import ModelOptions

request = GenerationRequest("llama3.2:latest", "Why is the sky blue?")
request.options = ModelOptions(temperature=0.2, top_k=25, top_p=0.25)
response = await ollama.generate(request)
print(response.response)
```

`generate_stream` yields `GenerationResponse` pieces. A response's `context`
can be set on the next request to keep a short conversational memory.
`GenerationRequest.with_suffix` builds a fill-in-the-middle request for code
models, and `add_image` attaches an `Image` given as base64 text. Model
options can also be read from JSON with `ModelOptions.from_json`.

## Structured output and keep-alive

`FormatType.json()` asks for plain JSON; `FormatType.structured(...)` with a
`JsonStructure` built from a pydantic model (`JsonStructure.from_model`) or a
ready JSON schema (`JsonStructure.for_schema`) asks for output matching that
schema. References in generated schemas are inlined, since the server does
not resolve `$ref`. `KeepAlive.indefinitely()`, `KeepAlive.unload_on_completion()`
and `KeepAlive.until(5, TimeUnit.MINUTES)` control how long the model stays loaded.

## Embeddings

```python
from ollamakit.embeddings import GenerateEmbeddingsRequest

request = GenerateEmbeddingsRequest("llama3.2:latest", ["Why is the sky blue?", "Why is the sky red?"])
response = await ollama.generate_embeddings(request)
print(len(response.embeddings))
```

## Tools

A tool subclasses `ollamakit.tools.Tool`, names itself, describes itself and
declares its parameters as a pydantic model. `ToolInfo.from_tool` turns it
into the description sent with a chat request; `Tool.invoke` validates the
arguments the model sends back and runs the tool.

```python
from pydantic import BaseModel, Field

from ollamakit.tools import Tool, ToolInfo


class WeatherParams(BaseModel):
    city: str = Field(description="City to get the weather for")


class Weather(Tool):
    name = "get_weather"
    description = "Get the weather for a given city."
    Params = WeatherParams

    async def call(self, params: WeatherParams) -> str:
        return f"Sunny in {params.city}"


tool = Weather()
history = [ChatMessage.user("What's the weather in Berlin?")]
request = ChatMessageRequest("llama3.2", [], tools=[ToolInfo.from_tool(tool)])
response = await ollama.send_chat_messages_with_history(history, request)
for call in response.message.tool_calls:
    history.append(ChatMessage.tool(await tool.invoke(call.function.arguments)))
```

Ready-made tools live in `ollamakit.tool_impls`: `Calculator` (arithmetic
with `+ - * / % **`), `Scraper` (a web page as Markdown), `DDGSearcher`
(web search) and `StockScraper` (stock quote details). The helpers they use,
`evaluate_expression`, `html_to_markdown`, `parse_search_results` and
`parse_stock_page`, can be called directly.

## Errors

Every error the package raises derives from `ollamakit.errors.OllamaError`:
`RequestError` when the HTTP request fails, `OtherError` with the server's
text when it refuses a request, `JsonError` for payloads that cannot be read,
`InternalError` for `{"error": ...}` replies, and the `ToolCallError` family
(`UnknownToolNameError`, `InvalidToolArgumentsError`, `InternalToolError`)
for tools.

## What this package does not do

- It has no model management: it cannot list, show, copy, create, delete,
  pull or push models on the server.
- It does not run tool calls by itself. The caller sends the tool
  descriptions, calls `Tool.invoke` for each tool call in the reply, adds the
  results to the history and asks again, as in the example above.
- There is no decorator that turns a plain function into a tool; write a
  `Tool` subclass.
- It installs no command-line program; it is a library only.