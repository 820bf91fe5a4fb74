"""Content moderation: data types and the client for the moderations endpoint."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .ratelimit import RateLimitHeaders
from .transport import Transport


class ModerationModel(str, Enum):
    OMNI_LATEST = "omni-moderation-latest"
    OMNI_20240926 = "omni-moderation-2024-09-26"
    TEXT_STABLE = "text-moderation-stable"
    TEXT_LATEST = "text-moderation-latest"
    # Deprecated and no longer accepted by the client.
    TEXT_001 = "text-moderation-001"


_VALID_MODELS = frozenset(
    {
        ModerationModel.OMNI_LATEST.value,
        ModerationModel.OMNI_20240926.value,
        ModerationModel.TEXT_STABLE.value,
        ModerationModel.TEXT_LATEST.value,
    }
)

_CATEGORY_KEYS = {
    "hate": "hate",
    "hate_threatening": "hate/threatening",
    "harassment": "harassment",
    "harassment_threatening": "harassment/threatening",
    "self_harm": "self-harm",
    "self_harm_intent": "self-harm/intent",
    "self_harm_instructions": "self-harm/instructions",
    "sexual": "sexual",
    "sexual_minors": "sexual/minors",
    "violence": "violence",
    "violence_graphic": "violence/graphic",
}


def _text(value: Any) -> str:
    return str(value.value) if isinstance(value, Enum) else str(value)


class ModerationInvalidModelError(ValueError):
    """The requested model cannot be used for moderation."""

    def __init__(self) -> None:
        super().__init__(
            "this model is not supported with moderation, "
            "please use text-moderation-stable or text-moderation-latest instead"
        )


@dataclass
class ModerationRequest:
    input: str = ""
    model: ModerationModel | str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.input:
            data["input"] = self.input
        model = _text(self.model)
        if model:
            data["model"] = model
        return data


@dataclass
class ResultCategories:
    hate: bool = False
    hate_threatening: bool = False
    harassment: bool = False
    harassment_threatening: bool = False
    self_harm: bool = False
    self_harm_intent: bool = False
    self_harm_instructions: bool = False
    sexual: bool = False
    sexual_minors: bool = False
    violence: bool = False
    violence_graphic: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ResultCategories:
        data = data or {}
        return cls(**{attr: bool(data.get(key, False)) for attr, key in _CATEGORY_KEYS.items()})


@dataclass
class ResultCategoryScores:
    hate: float = 0.0
    hate_threatening: float = 0.0
    harassment: float = 0.0
    harassment_threatening: float = 0.0
    self_harm: float = 0.0
    self_harm_intent: float = 0.0
    self_harm_instructions: float = 0.0
    sexual: float = 0.0
    sexual_minors: float = 0.0
    violence: float = 0.0
    violence_graphic: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ResultCategoryScores:
        data = data or {}
        return cls(
            **{attr: float(data.get(key) or 0.0) for attr, key in _CATEGORY_KEYS.items()}
        )


@dataclass
class Result:
    categories: ResultCategories = field(default_factory=ResultCategories)
    category_scores: ResultCategoryScores = field(default_factory=ResultCategoryScores)
    flagged: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Result:
        return cls(
            categories=ResultCategories.from_dict(data.get("categories")),
            category_scores=ResultCategoryScores.from_dict(data.get("category_scores")),
            flagged=bool(data.get("flagged", False)),
        )


@dataclass
class ModerationResponse:
    id: str = ""
    model: str = ""
    results: list[Result] = field(default_factory=list)
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ModerationResponse:
        return cls(
            id=data.get("id") or "",
            model=data.get("model") or "",
            results=[Result.from_dict(item) for item in data.get("results") or []],
        )


class ModerationClient:
    """Calls the moderations endpoint."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def moderations(self, request: ModerationRequest) -> ModerationResponse:
        """Classify the input; raise ``ModerationInvalidModelError`` for unsupported models."""
        model = _text(request.model)
        if model and model not in _VALID_MODELS:
            raise ModerationInvalidModelError()
        with self.transport.request(
            "POST", "/moderations", body=request.to_dict(), model=model
        ) as response:
            result = ModerationResponse.from_dict(response.json() or {})
            result.rate_limits = response.rate_limits()
        return result