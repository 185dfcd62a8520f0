"""Text-to-speech through ElevenLabs."""
import asyncio
import base64
import logging

import requests

from mockinterview.errors import UpstreamError

logger = logging.getLogger(__name__)

FEEDBACK_VOICE_SETTINGS = {"stability": 0.5, "similarity_boost": 0.75}
INTERVIEWER_VOICE_SETTINGS = {"stability": 0.5, "similarity_boost": 0.7}


class ElevenLabsClient:
    def __init__(self, api_key: str, voice_id: str, model_id: str = "eleven_multilingual_v2", timeout: float = 60):
        self.api_key = api_key
        self.voice_id = voice_id
        self.model_id = model_id
        self.timeout = timeout

    def synthesize(self, text: str, voice_settings: dict) -> bytes:
        """Return MPEG audio for ``text``; a failed call raises ``UpstreamError``."""
        try:
            res = requests.post(
                f"https://api.elevenlabs.io/v1/text-to-speech/{self.voice_id}",
                headers={
                    "xi-api-key": self.api_key,
                    "Content-Type": "application/json",
                    "Accept": "audio/mpeg",
                },
                json={
                    "text": text,
                    "model_id": self.model_id,
                    "voice_settings": voice_settings,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("[TTS] request error: %s", e)
            raise UpstreamError("ElevenLabs TTS request failed", status=None, body=str(e)) from e

        if not res.ok:
            logger.warning("[TTS] %s %s", res.status_code, res.text[:200])
            raise UpstreamError("ElevenLabs TTS request failed", status=res.status_code, body=res.text)
        return res.content

    async def asynthesize(self, text: str, voice_settings: dict) -> bytes:
        return await asyncio.to_thread(self.synthesize, text, voice_settings)


async def speak_reply(tts, reply: str) -> dict:
    """Attach base64 audio to an interviewer reply.

    Without a TTS client the reply goes back as text only; a TTS failure is
    reported in ``ttsError`` and never fails the turn.
    """
    if tts is None:
        return {"reply": reply}
    try:
        audio = await tts.asynthesize(reply, INTERVIEWER_VOICE_SETTINGS)
    except UpstreamError as e:
        detail = f"{e.status} {e.body}".strip() if e.status else e.body
        return {"reply": reply, "audio": None, "ttsError": f"TTS failed: {detail}"}
    return {"reply": reply, "audio": base64.b64encode(audio).decode("utf-8")}
