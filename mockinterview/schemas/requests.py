from typing import Any, ClassVar, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from mockinterview.errors import ValidationError


class RequestBody(BaseModel):
    """Base for JSON request bodies; failures map to one 400 message per field."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Keyed by the error location prefix; the longest matching prefix wins.
    error_messages: ClassVar[Dict[tuple, str]] = {}
    default_error: ClassVar[str] = "Invalid request body"

    @classmethod
    def from_body(cls, body: dict):
        try:
            return cls.model_validate(body)
        except PydanticValidationError as e:
            raise ValidationError(cls.error_message(e.errors()[0]["loc"])) from e

    @classmethod
    def error_message(cls, loc: tuple) -> str:
        for prefix in sorted(cls.error_messages, key=len, reverse=True):
            if tuple(loc[: len(prefix)]) == prefix:
                return cls.error_messages[prefix]
        return cls.default_error


class ProblemRef(BaseModel):
    """The parts of a problem the interviewer needs; other keys pass through."""

    model_config = ConfigDict(extra="allow")

    title: str = Field(min_length=1)
    prompt: str = Field(min_length=1)


class GradedProblem(BaseModel):
    model_config = ConfigDict(extra="allow")

    tests: List[Dict[str, Any]] = Field(min_length=1)


class EvaluateRequest(RequestBody):
    code: str = Field(min_length=1)
    problem: GradedProblem
    language: str = Field(min_length=1)

    default_error: ClassVar[str] = "Missing 'code', 'problem', or 'language' in request body"
    error_messages: ClassVar[Dict[tuple, str]] = {
        ("problem", "tests"): "Problem must have a non-empty 'tests' array",
    }

    @classmethod
    def error_message(cls, loc: tuple) -> str:
        # A non-object entry fails at ("problem", "tests", <index>)
        if len(loc) == 3 and tuple(loc[:2]) == ("problem", "tests") and isinstance(loc[2], int):
            return "Each test case must be an object"
        return super().error_message(loc)


class FeedbackRequest(RequestBody):
    problem: Dict[str, Any] = Field(min_length=1)
    code: str = Field(min_length=1)
    eval_result: Dict[str, Any] = Field(min_length=1)
    mode: Optional[str] = None
    role: Optional[str] = None
    company: Optional[str] = None
    language: Optional[str] = None

    default_error: ClassVar[str] = "Missing 'problem', 'code', or 'evalResult' in request body"


class InterviewerRequest(RequestBody):
    problem: ProblemRef
    action: Optional[str] = None
    user_message: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("userMessage", "message")
    )
    history: Any = Field(default=None, validation_alias=AliasChoices("history", "conversationHistory"))
    role: Optional[str] = None
    company: Optional[str] = None
    language: Optional[str] = None
    code: Optional[str] = None

    error_messages: ClassVar[Dict[tuple, str]] = {
        ("problem",): "Missing or invalid 'problem' in request body",
        ("userMessage",): "Missing 'userMessage' in request body",
        ("message",): "Missing 'userMessage' in request body",
    }


class VoiceFeedbackRequest(RequestBody):
    problem: ProblemRef
    answer: str = Field(min_length=1)
    role: Optional[str] = None
    company: Optional[str] = None

    error_messages: ClassVar[Dict[tuple, str]] = {
        ("problem",): "Missing or invalid 'problem' in request body",
        ("answer",): "Missing 'answer' (candidate's code/thoughts) in request body",
    }


class VoiceInterviewerRequest(RequestBody):
    problem: ProblemRef
    user_message: str = Field(min_length=1)
    history: Any = None
    role: Optional[str] = None
    company: Optional[str] = None

    error_messages: ClassVar[Dict[tuple, str]] = {
        ("problem",): "Missing or invalid 'problem' in request body",
        ("userMessage",): "Missing 'userMessage' in request body",
    }
