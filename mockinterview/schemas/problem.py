from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TestCase(BaseModel):
    description: str = ""
    input: Any = None
    expected: Any = None


class Problem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    prompt: str
    function_signature: Optional[str] = None
    topics: List[str] = []
    difficulty: str = "medium"
    roles: List[str] = []
    company_style: List[str] = []
    constraints: Optional[str] = None
    tests: List[TestCase] = Field(min_length=1)
