from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from mockinterview.dependencies import (
    get_llm_client,
    get_required_tts_client,
    get_tts_client,
    request_body,
)
from mockinterview.errors import EmptyUpstreamResponse, UpstreamError
from mockinterview.routers.interviewer import parse_history
from mockinterview.schemas.requests import VoiceFeedbackRequest, VoiceInterviewerRequest
from mockinterview.services.conversation import interviewer_reply
from mockinterview.services.llm import LLMClient
from mockinterview.services.voice import FEEDBACK_VOICE_SETTINGS, ElevenLabsClient, speak_reply


router = APIRouter(prefix="/api", tags=["voice"])

SPOKEN_FEEDBACK_FALLBACK = (
    "Thanks for your attempt. I'd like to see more detail on your approach and edge cases."
)

SPOKEN_FEEDBACK_PROMPT = """
You are a senior engineer interviewer.
Given the coding problem and the candidate's answer, produce concise spoken feedback.
Rules:
- Max 4 sentences.
- Speak as if you're talking to the candidate.
- Focus on correctness, complexity, edge cases, and communication.
- Do NOT output code.
- Do NOT mention that you are an AI.
- This feedback will be read aloud with text-to-speech.
"""


@router.post("/voice-feedback")
async def voice_feedback(
    llm: LLMClient = Depends(get_llm_client),
    tts: ElevenLabsClient = Depends(get_required_tts_client),
    payload: VoiceFeedbackRequest = Depends(request_body(VoiceFeedbackRequest)),
):
    """Short spoken feedback on the candidate's answer, returned as MPEG audio."""
    company = payload.company or "generic"
    role = payload.role or "newgrad"
    messages = [
        {"role": "system", "content": SPOKEN_FEEDBACK_PROMPT},
        {
            "role": "user",
            "content": f"Company style: {company}, Role: {role}\n"
                       f"Problem: {payload.problem.title}\n{payload.problem.prompt}\n"
                       f"Candidate answer:\n{payload.answer}",
        },
    ]
    try:
        feedback_text = await llm.acomplete(messages, temperature=0.4, max_tokens=250)
    except EmptyUpstreamResponse:
        feedback_text = SPOKEN_FEEDBACK_FALLBACK

    try:
        audio = await tts.asynthesize(feedback_text, FEEDBACK_VOICE_SETTINGS)
    except UpstreamError as e:
        return JSONResponse(
            status_code=502,
            content={"error": e.message, "detail": e.body, "fallbackText": feedback_text},
        )

    return Response(
        content=audio,
        media_type="audio/mpeg",
        headers={"Content-Length": str(len(audio))},
    )


@router.post("/voice-interviewer")
async def voice_interviewer(
    llm: LLMClient = Depends(get_llm_client),
    tts: Optional[ElevenLabsClient] = Depends(get_tts_client),
    payload: VoiceInterviewerRequest = Depends(request_body(VoiceInterviewerRequest)),
):
    """Interviewer reply plus base64 audio when TTS is available."""
    reply = await interviewer_reply(
        llm,
        "message",
        payload.problem.model_dump(),
        parse_history(payload.history),
        user_message=payload.user_message,
        role=payload.role or "newgrad",
        company=payload.company or "generic",
    )
    return JSONResponse(content=await speak_reply(tts, reply))
