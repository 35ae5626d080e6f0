from __future__ import annotations

import pytest

from ollamakit.embeddings import GenerateEmbeddingsRequest, GenerateEmbeddingsResponse
from ollamakit.errors import JsonError
from ollamakit.options import ModelOptions
from ollamakit.parameters import KeepAlive, TimeUnit


def test_single_input():
    data = GenerateEmbeddingsRequest("llama2:latest", "Why is the sky blue").to_dict()
    assert data == {"model": "llama2:latest", "input": "Why is the sky blue"}


def test_batch_input():
    texts = ["Why is the sky blue?", "Why is the sky red?"]
    request = GenerateEmbeddingsRequest("llama2:latest", texts)
    assert request.to_dict()["input"] == texts


def test_tuple_input_becomes_list():
    request = GenerateEmbeddingsRequest("m", ("a", "b"))
    assert request.input == ["a", "b"]
    assert request.to_dict()["input"] == ["a", "b"]


def test_default_input_is_empty_text():
    assert GenerateEmbeddingsRequest("m").to_dict()["input"] == ""


def test_invalid_input():
    with pytest.raises(TypeError):
        GenerateEmbeddingsRequest("m", ["ok", 3])
    with pytest.raises(TypeError):
        GenerateEmbeddingsRequest("m", b"bytes")


def test_optional_fields():
    options = ModelOptions(num_ctx=2048)
    data = GenerateEmbeddingsRequest(
        "m",
        "x",
        truncate=False,
        options=options,
        keep_alive=KeepAlive.until(5, TimeUnit.MINUTES),
    ).to_dict()
    assert data["truncate"] is False
    assert data["options"] == options.to_dict()
    assert data["keep_alive"] == "5m"


def test_unset_fields_left_out():
    data = GenerateEmbeddingsRequest("m", "x").to_dict()
    for key in ("truncate", "options", "keep_alive"):
        assert key not in data


def test_response_parsing():
    response = GenerateEmbeddingsResponse.from_dict({"embeddings": [[0.5, 1], [2.25]]})
    assert response.embeddings == [[0.5, 1.0], [2.25]]
    assert all(isinstance(x, float) for vector in response.embeddings for x in vector)


def test_response_errors():
    with pytest.raises(JsonError):
        GenerateEmbeddingsResponse.from_dict({})
    with pytest.raises(JsonError):
        GenerateEmbeddingsResponse.from_dict({"embeddings": [["a"]]})
    with pytest.raises(JsonError):
        GenerateEmbeddingsResponse.from_dict({"embeddings": [[True]]})
    with pytest.raises(JsonError):
        GenerateEmbeddingsResponse.from_dict({"embeddings": "nope"})