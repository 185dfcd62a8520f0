import json

import pytest
from fastapi.testclient import TestClient

from backend import app
from mockinterview.config import Settings
from mockinterview.dependencies import get_evaluator, get_llm_client, get_settings, get_tts_client
from mockinterview.errors import UpstreamError
from mockinterview.services.evaluator import JavaScriptEvaluator
from mockinterview.services.llm import LLMClient

UNDEFINED = object()


class FakeLLM(LLMClient):
    """Replays canned replies and records every request."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def complete(self, messages, temperature=0.4, max_tokens=None, json_mode=False):
        self.calls.append(
            {
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "json_mode": json_mode,
            }
        )
        reply = self.replies.pop(0) if self.replies else "ok"
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeTTS:
    def __init__(self, audio=b"ID3-fake-audio", fail=False):
        self.audio = audio
        self.fail = fail
        self.calls = []

    async def asynthesize(self, text, voice_settings):
        self.calls.append((text, voice_settings))
        if self.fail:
            raise UpstreamError("ElevenLabs TTS request failed", status=401, body="invalid api key")
        return self.audio


def spread_input(test_input):
    """Python-side stand-in for the harness's argument spreading."""
    if isinstance(test_input, list):
        return test_input
    if isinstance(test_input, dict):
        return list(test_input.values())
    return [test_input]


class FakeRuntime:
    """Stands in for Node.js: ``solve`` is a Python callable."""

    def __init__(self, solve=None, compile_error=None):
        self.solve = solve
        self.compile_error = compile_error
        self.payloads = []

    def execute(self, payload):
        self.payloads.append(payload)
        if self.compile_error:
            return {"compileError": self.compile_error}
        if payload["mode"] == "compile":
            return {"ok": True}
        try:
            result = self.solve(*spread_input(payload["input"]))
        except Exception as e:
            return {"error": str(e)}
        if result is UNDEFINED:
            return {"ok": True}
        return {"ok": True, "actual": json.loads(json.dumps(result))}


@pytest.fixture
def settings():
    return Settings(openrouter_api_key="test-key", elevenlabs_api_key=None)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(settings, fake_llm):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_tts_client] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def use_runtime(runtime):
    app.dependency_overrides[get_evaluator] = lambda: JavaScriptEvaluator(runtime)


def use_tts(tts):
    app.dependency_overrides[get_tts_client] = lambda: tts


@pytest.fixture
def sample_problem():
    return {
        "id": "add-two",
        "title": "Add Two Numbers",
        "prompt": "Return a + b.",
        "functionSignature": "function solve(a, b)",
        "topics": ["math"],
        "difficulty": "easy",
        "roles": ["intern"],
        "companyStyle": ["generic"],
        "constraints": "small integers",
        "tests": [
            {"description": "positives", "input": {"a": 1, "b": 2}, "expected": 3},
            {"description": "zeros", "input": [0, 0], "expected": 0},
            {"description": "negatives", "input": {"a": -2, "b": -3}, "expected": -5},
        ],
    }
