"""Checks of request parameters for o-series reasoning models."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class ReasoningModelError(ValueError):
    """A request uses a parameter that reasoning models do not accept."""


class ReasoningModelMaxTokensError(ReasoningModelError):
    def __init__(self) -> None:
        super().__init__("this model is not supported MaxTokens, please use MaxCompletionTokens")


class ReasoningModelLogprobsError(ReasoningModelError):
    def __init__(self) -> None:
        super().__init__("this model has beta-limitations, logprobs not supported")


class ReasoningModelParamsError(ReasoningModelError):
    def __init__(self) -> None:
        super().__init__(
            "this model has beta-limitations, temperature, top_p and n are fixed at 1, "
            "while presence_penalty and frequency_penalty are fixed at 0"
        )


def _field(request: Any, name: str, default: Any) -> Any:
    if isinstance(request, Mapping):
        value = request.get(name, default)
    else:
        value = getattr(request, name, default)
    return default if value is None else value


class ReasoningValidator:
    """Validates chat requests aimed at o1 and o3 models.

    The request may be a mapping or any object with the request's fields as
    attributes; unset fields count as zero.
    """

    def validate(self, request: Any) -> None:
        """Raise a ``ReasoningModelError`` if the request breaks a limitation."""
        model = _field(request, "model", "")
        if not (model.startswith("o1") or model.startswith("o3")):
            return
        if _field(request, "max_tokens", 0) > 0:
            raise ReasoningModelMaxTokensError()
        if _field(request, "logprobs", False):
            raise ReasoningModelLogprobsError()
        for name in ("temperature", "top_p", "n"):
            value = _field(request, name, 0)
            if value > 0 and value != 1:
                raise ReasoningModelParamsError()
        for name in ("presence_penalty", "frequency_penalty"):
            if _field(request, name, 0) > 0:
                raise ReasoningModelParamsError()