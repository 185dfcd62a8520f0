import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mockinterview.config import FRONTEND_URL
from mockinterview.errors import InterviewServiceError
from mockinterview.routers import (
    evaluation_router,
    feedback_router,
    interviewer_router,
    problems_router,
    voice_router,
)


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("mockinterview")

app = FastAPI(title="Mock Interview API")

app.include_router(problems_router)
app.include_router(evaluation_router)
app.include_router(feedback_router)
app.include_router(interviewer_router)
app.include_router(voice_router)


def _strip_trailing_slash(value: str) -> str:
    return value[:-1] if value.endswith("/") else value


allowed_origins = [
    _strip_trailing_slash(FRONTEND_URL),
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InterviewServiceError)
async def interview_error_handler(request: Request, exc: InterviewServiceError):
    if exc.status_code >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Mock Interview API is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
