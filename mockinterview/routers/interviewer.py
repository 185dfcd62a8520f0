from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mockinterview.dependencies import get_llm_client, request_body
from mockinterview.errors import ValidationError
from mockinterview.schemas.conversation import ConversationMessage
from mockinterview.schemas.requests import InterviewerRequest
from mockinterview.services.conversation import ACTIONS, interviewer_reply
from mockinterview.services.llm import LLMClient

router = APIRouter(prefix="/api", tags=["interviewer"])

# Actions that make sense without anything new from the candidate
MESSAGE_OPTIONAL_ACTIONS = {"start", "hint", "followup"}


def parse_history(raw: Any) -> list[ConversationMessage]:
    if not isinstance(raw, list):
        return []
    return [ConversationMessage.from_wire(m) for m in raw if isinstance(m, dict)]


@router.post("/interviewer")
async def interviewer_turn(
    llm: LLMClient = Depends(get_llm_client),
    payload: InterviewerRequest = Depends(request_body(InterviewerRequest)),
):
    """Produce the interviewer's next message."""
    action = (payload.action or "message").lower()
    if action not in ACTIONS:
        raise ValidationError(f"Unknown action: {action}")
    if not payload.user_message and action not in MESSAGE_OPTIONAL_ACTIONS:
        raise ValidationError("Missing 'userMessage' in request body")

    reply = await interviewer_reply(
        llm,
        action,
        payload.problem.model_dump(),
        parse_history(payload.history),
        user_message=payload.user_message,
        role=payload.role or "newgrad",
        company=payload.company or "generic",
        language=payload.language or "javascript",
        code=payload.code,
    )
    return JSONResponse(
        content={
            "reply": reply,
            "response": reply,
            "message": {"role": "assistant", "content": reply},
        }
    )
