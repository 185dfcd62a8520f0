import asyncio

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mockinterview.dependencies import get_evaluator, request_body
from mockinterview.schemas.requests import EvaluateRequest
from mockinterview.services.evaluator import JavaScriptEvaluator

router = APIRouter(prefix="/api", tags=["evaluation"])


@router.post("/evaluate")
async def evaluate_code(
    payload: EvaluateRequest = Depends(request_body(EvaluateRequest)),
    evaluator: JavaScriptEvaluator = Depends(get_evaluator),
):
    """Run the candidate's code against every test case of the problem."""
    result = await asyncio.to_thread(
        evaluator.evaluate,
        payload.code,
        payload.problem.tests,
        payload.language.strip().lower(),
    )
    return JSONResponse(content=result.model_dump(by_alias=True))
