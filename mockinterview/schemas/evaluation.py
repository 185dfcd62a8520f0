from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TestOutcome(BaseModel):
    description: str = ""
    input: Any = None
    expected: Any = None
    actual: Any = None
    passed: bool
    error: Optional[str] = None


class EvaluationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    results: List[TestOutcome]
    passed_count: int
    total_tests: int
    score: int
