from dataclasses import dataclass

import pytest

from oaiclient.reasoning import (
    ReasoningModelError,
    ReasoningModelLogprobsError,
    ReasoningModelMaxTokensError,
    ReasoningModelParamsError,
    ReasoningValidator,
)


@dataclass
class ChatRequest:
    model: str = ""
    max_tokens: int = 0
    logprobs: bool = False
    temperature: float = 0
    top_p: float = 0
    n: int = 0
    presence_penalty: float = 0
    frequency_penalty: float = 0


def test_error_messages():
    assert str(ReasoningModelMaxTokensError()) == (
        "this model is not supported MaxTokens, please use MaxCompletionTokens"
    )
    assert str(ReasoningModelLogprobsError()) == "this model has beta-limitations, logprobs not supported"
    assert str(ReasoningModelParamsError()) == (
        "this model has beta-limitations, temperature, top_p and n are fixed at 1, "
        "while presence_penalty and frequency_penalty are fixed at 0"
    )


@pytest.mark.parametrize(
    ("fields", "error"),
    [
        ({"max_tokens": 10}, ReasoningModelMaxTokensError),
        ({"logprobs": True}, ReasoningModelLogprobsError),
        ({"temperature": 0.5}, ReasoningModelParamsError),
        ({"top_p": 0.9}, ReasoningModelParamsError),
        ({"n": 2}, ReasoningModelParamsError),
        ({"presence_penalty": 0.1}, ReasoningModelParamsError),
        ({"frequency_penalty": 0.1}, ReasoningModelParamsError),
    ],
)
@pytest.mark.parametrize("model", ["o1-mini", "o3-mini"])
def test_reasoning_models_reject_parameters(model, fields, error):
    with pytest.raises(error) as info:
        ReasoningValidator().validate(ChatRequest(model=model, **fields))
    assert isinstance(info.value, ReasoningModelError)
    assert isinstance(info.value, ValueError)


def test_max_tokens_is_checked_first():
    request = ChatRequest(model="o1", max_tokens=5, logprobs=True, n=3)
    with pytest.raises(ReasoningModelMaxTokensError):
        ReasoningValidator().validate(request)


def test_other_models_are_not_checked():
    validator = ReasoningValidator()
    fields = {"max_tokens": 10, "logprobs": True, "temperature": 0.5}
    assert validator.validate(ChatRequest(model="gpt-4o", **fields)) is None
    with pytest.raises(ReasoningModelMaxTokensError):
        validator.validate(ChatRequest(model="o1-preview", **fields))


def test_values_fixed_at_one_are_accepted():
    validator = ReasoningValidator()
    assert validator.validate(ChatRequest(model="o1", temperature=1, top_p=1, n=1)) is None
    with pytest.raises(ReasoningModelParamsError):
        validator.validate(ChatRequest(model="o1", temperature=1, top_p=1, n=1, frequency_penalty=1))


def test_mapping_requests():
    validator = ReasoningValidator()
    assert validator.validate({"model": "o3-mini", "temperature": None, "n": 1}) is None
    with pytest.raises(ReasoningModelLogprobsError):
        validator.validate({"model": "o3-mini", "logprobs": True})