import io
import json

import pytest

from oaiclient.moderation import (
    ModerationClient,
    ModerationInvalidModelError,
    ModerationModel,
    ModerationRequest,
    ModerationResponse,
    ResultCategories,
    ResultCategoryScores,
)
from oaiclient.transport import Transport

_KEYS = [
    "hate",
    "hate/threatening",
    "harassment",
    "harassment/threatening",
    "self-harm",
    "self-harm/intent",
    "self-harm/instructions",
    "sexual",
    "sexual/minors",
    "violence",
    "violence/graphic",
]

_TRIGGERS = [
    ("hate", "hate"),
    ("harass", "harassment"),
    ("suicide", "self-harm"),
    ("drink bleach", "self-harm/instructions"),
    ("porn", "sexual"),
    ("kill", "violence"),
    ("corpse", "violence/graphic"),
]


class _FakeResponse(io.BytesIO):
    def __init__(self, body, status=200):
        super().__init__(body)
        self.status = status
        self.headers = {}
        self.reason = ""


class _ModerationServer:
    def __init__(self):
        self.requests = []

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        request = json.loads(req.data)
        categories = {key: False for key in _KEYS}
        scores = {key: 0.0 for key in _KEYS}
        for trigger, key in _TRIGGERS:
            if trigger in request.get("input", ""):
                categories[key] = True
                scores[key] = 1.0
                break
        body = {
            "id": "modr-1",
            "model": request.get("model", ""),
            "results": [{"categories": categories, "category_scores": scores, "flagged": True}],
        }
        return _FakeResponse(json.dumps(body).encode())


def _client():
    server = _ModerationServer()
    return ModerationClient(Transport("token", "http://test.local/v1", opener=server)), server


def test_moderations():
    client, server = _client()
    response = client.moderations(
        ModerationRequest(model=ModerationModel.TEXT_STABLE, input="I want to kill them.")
    )
    assert response.model == "text-moderation-stable"
    assert len(response.results) == 1
    result = response.results[0]
    assert result.flagged is True
    assert result.categories == ResultCategories(violence=True)
    assert result.category_scores.violence == 1.0
    assert server.requests[0].full_url == "http://test.local/v1/moderations"


@pytest.mark.parametrize(
    "model",
    [
        ModerationModel.TEXT_STABLE,
        ModerationModel.TEXT_LATEST,
        ModerationModel.OMNI_20240926,
        ModerationModel.OMNI_LATEST,
        "",
    ],
)
def test_moderations_accepts_valid_models(model):
    client, _ = _client()
    response = client.moderations(ModerationRequest(model=model, input="I want to kill them."))
    assert response.results[0].categories.violence is True


@pytest.mark.parametrize("model", ["gpt-3.5-turbo", ModerationModel.TEXT_001])
def test_moderations_rejects_invalid_model(model):
    client, server = _client()
    with pytest.raises(ModerationInvalidModelError):
        client.moderations(ModerationRequest(model=model, input="I want to kill them."))
    assert server.requests == []


def test_request_omits_empty_fields():
    assert ModerationRequest().to_dict() == {}
    assert ModerationRequest(input="x", model=ModerationModel.OMNI_LATEST).to_dict() == {
        "input": "x",
        "model": "omni-moderation-latest",
    }


def test_scores_from_dict_maps_json_keys():
    scores = ResultCategoryScores.from_dict({"self-harm/intent": 0.25, "hate/threatening": 0.5})
    assert scores.self_harm_intent == 0.25
    assert scores.hate_threatening == 0.5
    assert scores.sexual == 0.0


def test_response_from_dict_without_results():
    response = ModerationResponse.from_dict({"id": "x", "model": "m"})
    assert response == ModerationResponse(id="x", model="m", results=[])