import json

import pytest

from ollamakit.errors import JsonError
from ollamakit.options import LocalModel, ModelInfo, ModelOptions

OPTIONS_JSON = """{
  "temperature": 0.2,
  "repeat_penalty": 1.5,
  "top_k": 25,
  "top_p": 0.25
}"""


def test_default_options_serialize_empty():
    assert ModelOptions().to_dict() == {}


def test_set_options_only_are_serialized():
    opts = ModelOptions(temperature=0.2, repeat_penalty=1.5, top_k=25, top_p=0.25)
    assert opts.to_dict() == json.loads(OPTIONS_JSON)


def test_from_json_matches_builder():
    opts = ModelOptions.from_json(OPTIONS_JSON)
    assert opts == ModelOptions(temperature=0.2, repeat_penalty=1.5, top_k=25, top_p=0.25)
    assert opts.to_dict() == json.loads(OPTIONS_JSON)


def test_stop_round_trip():
    opts = ModelOptions(stop=["[INST]", "</s>"], seed=146)
    assert ModelOptions.from_dict(opts.to_dict()) == opts
    assert opts.to_dict()["stop"] == ["[INST]", "</s>"]


def test_from_dict_ignores_unknown_keys_and_nulls():
    opts = ModelOptions.from_dict({"num_ctx": 16384, "unknown": 1, "seed": None})
    assert opts.to_dict() == {"num_ctx": 16384}


@pytest.mark.parametrize(
    "data",
    [{"top_k": -1}, {"temperature": "hot"}, {"seed": True}, {"mirostat": 300}, {"stop": "x"}],
)
def test_from_dict_rejects_bad_values(data):
    with pytest.raises(JsonError):
        ModelOptions.from_dict(data)


def test_from_json_rejects_malformed_text():
    with pytest.raises(JsonError):
        ModelOptions.from_json("{not json")


def test_constructor_rejects_negative_unsigned():
    with pytest.raises(ValueError):
        ModelOptions(num_thread=-4)


def test_local_model_round_trip():
    data = {"name": "llama2:latest", "modified_at": "2023-08-04T08:52:19-07:00", "size": 3825819519}
    model = LocalModel.from_dict(data)
    assert model.name == "llama2:latest"
    assert model.to_dict() == data


def test_local_model_missing_field():
    with pytest.raises(JsonError):
        LocalModel.from_dict({"name": "llama2:latest", "size": 1})


def test_model_info_defaults():
    info = ModelInfo.from_dict({})
    assert info == ModelInfo()
    assert info.license == ""
    assert info.model_info == {}


def test_model_info_fields():
    info = ModelInfo.from_dict({"template": "T", "model_info": {"general.architecture": "llama"}})
    assert info.template == "T"
    assert info.model_info["general.architecture"] == "llama"