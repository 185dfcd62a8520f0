"""Error taxonomy for the interview service.

Every error knows its HTTP status and the JSON body it renders to; the
exception handler registered in ``backend.py`` turns them into responses.
"""
from typing import Any, Optional


class InterviewServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message}


class ValidationError(InterviewServiceError):
    """Malformed or missing request fields."""
    status_code = 400


class NotFound(InterviewServiceError):
    status_code = 404


class ConfigurationError(InterviewServiceError):
    """A required credential or runtime is missing."""
    status_code = 500


class UpstreamError(InterviewServiceError):
    """The LLM or TTS provider answered with a non-success status."""
    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body

    def to_payload(self) -> dict:
        return {"error": self.message, "status": self.status, "body": self.body}


class UpstreamFormatError(InterviewServiceError):
    """The LLM returned non-JSON or a schema-incomplete payload."""
    status_code = 502

    def __init__(self, message: str, raw: Any = None):
        super().__init__(message)
        self.raw = raw

    def to_payload(self) -> dict:
        return {"error": self.message, "raw": self.raw}


class EmptyUpstreamResponse(UpstreamFormatError):
    pass


class EvaluationError(InterviewServiceError):
    """Evaluation aborted before any test ran."""
    status_code = 400

    def __init__(self, message: str, total_tests: int, detail: Optional[str] = None):
        super().__init__(message)
        self.total_tests = total_tests
        self.detail = detail

    def to_payload(self) -> dict:
        payload = {"error": self.message}
        if self.detail is not None:
            payload["message"] = self.detail
        payload.update({"results": [], "passedCount": 0, "totalTests": self.total_tests})
        return payload


class CompilationError(EvaluationError):
    def __init__(self, detail: str, total_tests: int):
        super().__init__("Code compilation failed", total_tests, detail=detail)


class UnsupportedLanguage(EvaluationError):
    def __init__(self, language: str, total_tests: int):
        super().__init__(f"Language {language} is not yet supported for evaluation", total_tests)
        self.language = language
