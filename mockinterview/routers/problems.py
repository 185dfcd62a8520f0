from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mockinterview.dependencies import get_catalog, get_llm_client
from mockinterview.errors import UpstreamError
from mockinterview.schemas.problem import Problem
from mockinterview.services.llm import LLMClient
from mockinterview.services.problem_provider import (
    COMPANIES,
    DIFFICULTIES,
    ROLES,
    generate_problem,
    pick_problem,
)


router = APIRouter(prefix="/api", tags=["problems"])


@router.get("/options")
async def list_options():
    """Companies, roles and difficulties the UI can offer."""
    return {"companies": COMPANIES, "roles": ROLES, "difficulties": DIFFICULTIES}


@router.get("/problem")
async def get_problem(
    role: Optional[str] = None,
    company: Optional[str] = None,
    difficulty: Optional[str] = None,
    catalog: list[Problem] = Depends(get_catalog),
):
    """Pick a random problem from the bundled catalog."""
    problem = pick_problem(catalog, role=role, company=company, difficulty=difficulty)
    return JSONResponse(content=problem.model_dump(by_alias=True))


@router.get("/problems")
async def generate_tailored_problem(
    role: Optional[str] = None,
    company: Optional[str] = None,
    difficulty: Optional[str] = None,
    llm: LLMClient = Depends(get_llm_client),
):
    """Generate an original problem tailored to company, difficulty and role."""
    try:
        problem = await generate_problem(llm, company=company, difficulty=difficulty, role=role)
    except UpstreamError as e:
        return JSONResponse(
            status_code=502,
            content={"error": e.message, "status": e.status, "detail": e.body},
        )
    return JSONResponse(content=problem.model_dump(by_alias=True))
