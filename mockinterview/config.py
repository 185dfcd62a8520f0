import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# LLM provider: "openrouter" or "gemini"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openrouter")

# OpenRouter
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "openai/gpt-4.1-mini")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

# Gemini
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# ElevenLabs
ELEVENLABS_API_KEY = os.getenv("ELEVENLABS_API_KEY", "")
ELEVENLABS_VOICE_ID = os.getenv("ELEVENLABS_VOICE_ID", "JBFqnCBsd6RMkjVDRZzb")
ELEVENLABS_MODEL_ID = os.getenv("ELEVENLABS_MODEL_ID", "eleven_multilingual_v2")

# Feedback: "reference" (optimal solution + blended score) or "single"
FEEDBACK_MODE = os.getenv("FEEDBACK_MODE", "reference")

# Code evaluation
NODE_BINARY = os.getenv("NODE_BINARY", "node")
EVAL_TIMEOUT_SECONDS = float(os.getenv("EVAL_TIMEOUT_SECONDS", "5"))

UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "60"))

# Frontend URL for CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")


class Settings(BaseModel):
    """Runtime configuration handed to each component."""
    llm_provider: str = "openrouter"
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = "openai/gpt-4.1-mini"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_voice_id: str = "JBFqnCBsd6RMkjVDRZzb"
    elevenlabs_model_id: str = "eleven_multilingual_v2"
    feedback_mode: str = "reference"
    node_binary: str = "node"
    eval_timeout_seconds: float = 5.0
    upstream_timeout_seconds: float = 60.0


def load_settings() -> Settings:
    """Build settings from the process environment."""
    return Settings(
        llm_provider=LLM_PROVIDER.strip().lower(),
        openrouter_api_key=OPENROUTER_API_KEY or None,
        openrouter_model=OPENROUTER_MODEL,
        openrouter_base_url=OPENROUTER_BASE_URL.rstrip("/"),
        gemini_api_key=GEMINI_API_KEY or None,
        gemini_model=GEMINI_MODEL,
        elevenlabs_api_key=ELEVENLABS_API_KEY or None,
        elevenlabs_voice_id=ELEVENLABS_VOICE_ID,
        elevenlabs_model_id=ELEVENLABS_MODEL_ID,
        feedback_mode=FEEDBACK_MODE.strip().lower(),
        node_binary=NODE_BINARY,
        eval_timeout_seconds=EVAL_TIMEOUT_SECONDS,
        upstream_timeout_seconds=UPSTREAM_TIMEOUT_SECONDS,
    )
