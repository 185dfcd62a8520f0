from functools import lru_cache
from typing import Optional, Type

from fastapi import Depends, Request

from mockinterview.config import Settings, load_settings
from mockinterview.errors import ConfigurationError, ValidationError
from mockinterview.schemas.problem import Problem
from mockinterview.schemas.requests import RequestBody
from mockinterview.services.evaluator import JavaScriptEvaluator, build_evaluator
from mockinterview.services.llm import LLMClient, build_llm_client
from mockinterview.services.problem_provider import load_catalog
from mockinterview.services.voice import ElevenLabsClient


def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_catalog() -> list[Problem]:
    return load_catalog()


def get_llm_client(settings: Settings = Depends(get_settings)) -> LLMClient:
    """Fails with a 500 before the request body is even read if the key is missing."""
    return build_llm_client(settings)


def get_tts_client(settings: Settings = Depends(get_settings)) -> Optional[ElevenLabsClient]:
    """Optional TTS: None when no credentials are configured."""
    if not settings.elevenlabs_api_key or not settings.elevenlabs_voice_id:
        return None
    return ElevenLabsClient(
        settings.elevenlabs_api_key,
        settings.elevenlabs_voice_id,
        model_id=settings.elevenlabs_model_id,
        timeout=settings.upstream_timeout_seconds,
    )


def get_required_tts_client(
    tts: Optional[ElevenLabsClient] = Depends(get_tts_client),
) -> ElevenLabsClient:
    if tts is None:
        raise ConfigurationError("Missing ELEVENLABS_API_KEY on server")
    return tts


def get_evaluator(settings: Settings = Depends(get_settings)) -> JavaScriptEvaluator:
    return build_evaluator(settings.node_binary, settings.eval_timeout_seconds)


async def get_json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON body")
    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body")
    return body


def request_body(model: Type[RequestBody]):
    """Dependency that validates the JSON body into ``model``."""

    async def dependency(body: dict = Depends(get_json_body)):
        return model.from_body(body)

    return dependency
