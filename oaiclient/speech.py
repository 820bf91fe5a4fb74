"""Text to speech: request types and the client for the speech endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .transport import ApiResponse, Transport


def _text(value: Any) -> str:
    return str(value.value) if isinstance(value, Enum) else str(value)


class SpeechModel(str, Enum):
    TTS_1 = "tts-1"
    TTS_1_HD = "tts-1-hd"
    CANARY_TTS = "canary-tts"


class SpeechVoice(str, Enum):
    ALLOY = "alloy"
    ECHO = "echo"
    FABLE = "fable"
    ONYX = "onyx"
    NOVA = "nova"
    SHIMMER = "shimmer"


class SpeechResponseFormat(str, Enum):
    MP3 = "mp3"
    OPUS = "opus"
    AAC = "aac"
    FLAC = "flac"
    WAV = "wav"
    PCM = "pcm"


@dataclass
class CreateSpeechRequest:
    """Speech request; the server defaults to mp3 and a speed of 1.0."""

    model: SpeechModel | str
    input: str
    voice: SpeechVoice | str
    response_format: SpeechResponseFormat | str = ""
    speed: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "model": _text(self.model),
            "input": self.input,
            "voice": _text(self.voice),
        }
        response_format = _text(self.response_format)
        if response_format:
            data["response_format"] = response_format
        if self.speed:
            data["speed"] = self.speed
        return data


class SpeechClient:
    """Calls the speech endpoint."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def create_speech(self, request: CreateSpeechRequest) -> ApiResponse:
        """Return the audio response; the caller reads and closes it."""
        return self.transport.request(
            "POST", "/audio/speech", body=request.to_dict(), model=_text(request.model)
        )