from mockinterview.schemas.problem import Problem, TestCase
from mockinterview.schemas.evaluation import EvaluationResult, TestOutcome
from mockinterview.schemas.feedback import FeedbackResult
from mockinterview.schemas.conversation import ConversationMessage
from mockinterview.schemas.requests import (
    EvaluateRequest,
    FeedbackRequest,
    InterviewerRequest,
    VoiceFeedbackRequest,
    VoiceInterviewerRequest,
)

__all__ = [
    "Problem",
    "TestCase",
    "EvaluationResult",
    "TestOutcome",
    "FeedbackResult",
    "ConversationMessage",
    "EvaluateRequest",
    "FeedbackRequest",
    "InterviewerRequest",
    "VoiceFeedbackRequest",
    "VoiceInterviewerRequest",
]
