import io
import json
import urllib.error

import pytest

from oaiclient.speech import (
    CreateSpeechRequest,
    SpeechClient,
    SpeechModel,
    SpeechResponseFormat,
    SpeechVoice,
)
from oaiclient.transport import Transport

AUDIO = b"ID3\x03\x00fake mp3 payload"


class _FakeResponse(io.BytesIO):
    def __init__(self, body, status=200, headers=None):
        super().__init__(body)
        self.status = status
        self.headers = headers or {}
        self.reason = ""


def _speech_server(req, timeout=None):
    if req.get_method() != "POST":
        return _FakeResponse(b"method not allowed", 405)
    if req.get_header("Content-type") != "application/json":
        return _FakeResponse(b"request is not json", 400)
    params = json.loads(req.data)
    for name in ("model", "input", "voice"):
        if name not in params:
            return _FakeResponse(f"no {name} in params".encode(), 400)
    return _FakeResponse(AUDIO, 200, {"Content-Type": "audio/mpeg"})


def _client(opener=_speech_server):
    return SpeechClient(Transport("token", "http://test.local/v1", opener=opener))


def test_create_speech_returns_audio():
    client = _client()
    with client.create_speech(
        CreateSpeechRequest(model=SpeechModel.TTS_1, input="Hello!", voice=SpeechVoice.ALLOY)
    ) as response:
        assert response.content == AUDIO
        assert response.headers["Content-Type"] == "audio/mpeg"


def test_create_speech_sends_request_body():
    seen = []

    def recording(req, timeout=None):
        seen.append(req)
        return _speech_server(req, timeout)

    client = _client(recording)
    with client.create_speech(
        CreateSpeechRequest(
            model=SpeechModel.TTS_1_HD,
            input="Hello!",
            voice=SpeechVoice.NOVA,
            response_format=SpeechResponseFormat.WAV,
            speed=1.5,
        )
    ) as response:
        assert response.content == AUDIO
    assert seen[0].full_url == "http://test.local/v1/audio/speech"
    assert json.loads(seen[0].data) == {
        "model": "tts-1-hd",
        "input": "Hello!",
        "voice": "nova",
        "response_format": "wav",
        "speed": 1.5,
    }


def test_request_omits_optional_fields():
    request = CreateSpeechRequest(model="tts-1", input="x", voice="echo")
    assert request.to_dict() == {"model": "tts-1", "input": "x", "voice": "echo"}


def test_server_error_raises_http_error():
    def failing(req, timeout=None):
        return _FakeResponse(b"bad", 400)

    client = _client(failing)
    with pytest.raises(urllib.error.HTTPError) as info:
        client.create_speech(
            CreateSpeechRequest(model=SpeechModel.TTS_1, input="Hello!", voice=SpeechVoice.ALLOY)
        )
    assert info.value.code == 400