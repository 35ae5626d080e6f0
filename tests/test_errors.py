import pytest

from ollamakit.errors import (
    InternalError,
    InternalToolError,
    InvalidToolArgumentsError,
    JsonError,
    OllamaError,
    OtherError,
    ToolCallError,
    UnknownToolNameError,
)


def test_internal_error_message():
    err = InternalError("boom")
    assert err.message == "boom"
    assert str(err) == "Internal Ollama error: boom"


@pytest.mark.parametrize(
    "payload",
    [{"error": "model not found"}, '{"error": "model not found"}', b'{"error": "model not found"}'],
)
def test_internal_error_from_payload(payload):
    assert InternalError.from_payload(payload).message == "model not found"


@pytest.mark.parametrize("payload", [{"status": "success"}, "not json", b"\xff\xfe", '["error"]'])
def test_internal_error_from_bad_payload(payload):
    with pytest.raises(JsonError):
        InternalError.from_payload(payload)


def test_other_error_keeps_text():
    err = OtherError("server said no")
    assert str(err) == "server said no"
    assert err.message == "server said no"


def test_unknown_tool_name_is_tool_call_error():
    err = UnknownToolNameError()
    assert str(err) == "Ollama attempted to call a tool with a name we do not recognize"
    assert isinstance(err, ToolCallError)


def test_internal_tool_error_is_ollama_error():
    err = InternalToolError()
    assert str(err) == "Tool errored internally when it was called"
    assert isinstance(err, OllamaError)


def test_detail_is_appended():
    err = InvalidToolArgumentsError("field x")
    assert err.detail == "field x"
    assert str(err).endswith(": field x")


def test_json_error_default_message():
    assert str(JsonError()) == "Ollama JSON error"