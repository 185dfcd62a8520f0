from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mockinterview.config import Settings
from mockinterview.dependencies import get_llm_client, get_settings, request_body
from mockinterview.errors import ValidationError
from mockinterview.schemas.requests import FeedbackRequest
from mockinterview.services.feedback import feedback_payload, generate_feedback
from mockinterview.services.llm import LLMClient

router = APIRouter(prefix="/api", tags=["feedback"])

FEEDBACK_MODES = {"single", "reference"}


@router.post("/feedback")
async def get_feedback(
    llm: LLMClient = Depends(get_llm_client),
    payload: FeedbackRequest = Depends(request_body(FeedbackRequest)),
    settings: Settings = Depends(get_settings),
):
    """Critique the candidate's solution and score it."""
    mode = (payload.mode or settings.feedback_mode).lower()
    if mode not in FEEDBACK_MODES:
        raise ValidationError(f"Unknown feedback mode: {mode}")

    result = await generate_feedback(
        llm,
        mode,
        payload.problem,
        payload.code,
        payload.eval_result,
        role=payload.role,
        company=payload.company,
        language=payload.language,
    )
    return JSONResponse(content=feedback_payload(result))
