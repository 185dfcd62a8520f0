import asyncio
import base64

import pytest

from mockinterview.errors import UpstreamError
from mockinterview.services import voice as voice_module
from mockinterview.services.voice import (
    FEEDBACK_VOICE_SETTINGS,
    INTERVIEWER_VOICE_SETTINGS,
    ElevenLabsClient,
    speak_reply,
)

from conftest import FakeTTS


class FakeResponse:
    def __init__(self, status_code=200, content=b"", text=""):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.content = content
        self.text = text


def test_synthesize_request_shape(monkeypatch):
    captured = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        captured.update(url=url, headers=headers, json=json)
        return FakeResponse(content=b"mp3")

    monkeypatch.setattr(voice_module.requests, "post", fake_post)
    client = ElevenLabsClient("xi-test", "voice-123")

    assert client.synthesize("Hello there", FEEDBACK_VOICE_SETTINGS) == b"mp3"
    assert captured["url"] == "https://api.elevenlabs.io/v1/text-to-speech/voice-123"
    assert captured["headers"]["xi-api-key"] == "xi-test"
    assert captured["json"] == {
        "text": "Hello there",
        "model_id": "eleven_multilingual_v2",
        "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
    }


def test_synthesize_failure(monkeypatch):
    monkeypatch.setattr(
        voice_module.requests,
        "post",
        lambda *args, **kwargs: FakeResponse(status_code=401, text="unauthorized"),
    )
    with pytest.raises(UpstreamError) as exc_info:
        ElevenLabsClient("bad", "voice-123").synthesize("hi", INTERVIEWER_VOICE_SETTINGS)
    assert exc_info.value.status == 401
    assert exc_info.value.body == "unauthorized"


def test_speak_reply_without_tts():
    assert asyncio.run(speak_reply(None, "Hello")) == {"reply": "Hello"}


def test_speak_reply_encodes_audio():
    result = asyncio.run(speak_reply(FakeTTS(audio=b"\x00\x01"), "Hello"))
    assert result["reply"] == "Hello"
    assert base64.b64decode(result["audio"]) == b"\x00\x01"
    assert "ttsError" not in result


def test_speak_reply_annotates_failure():
    result = asyncio.run(speak_reply(FakeTTS(fail=True), "Hello"))
    assert result == {"reply": "Hello", "audio": None, "ttsError": "TTS failed: 401 invalid api key"}
