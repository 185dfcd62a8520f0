from mockinterview.routers.problems import router as problems_router
from mockinterview.routers.evaluation import router as evaluation_router
from mockinterview.routers.feedback import router as feedback_router
from mockinterview.routers.interviewer import router as interviewer_router
from mockinterview.routers.voice import router as voice_router

__all__ = [
    "problems_router",
    "evaluation_router",
    "feedback_router",
    "interviewer_router",
    "voice_router",
]
