from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FeedbackResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    feedback: str
    solution: Optional[str] = None
    score: int
    test_score: Optional[int] = None
    ai_score: Optional[int] = None
