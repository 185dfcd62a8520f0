"""Interview problems: the bundled catalog and LLM-generated ones."""
import json
import logging
import os
import random
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from mockinterview.errors import NotFound, UpstreamFormatError
from mockinterview.schemas.problem import Problem
from mockinterview.services.llm import LLMClient, strip_code_fences

logger = logging.getLogger(__name__)

COMPANIES = ["google", "meta", "amazon"]
ROLES = ["intern", "newgrad", "swe1"]
DIFFICULTIES = ["easy", "medium", "hard"]

CATALOG_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "problems.json")

REQUIRED_FIELDS = ("id", "title", "prompt", "tests")

GENERATION_SYSTEM_PROMPT = (
    "You ONLY respond with valid JSON exactly matching the requested schema. "
    "No explanations. No markdown. No code fences. No surrounding text."
)


def load_catalog(path: str = CATALOG_PATH) -> list[Problem]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return [Problem.model_validate(p) for p in raw]


def filter_problems(
    problems: list[Problem],
    role: Optional[str] = None,
    company: Optional[str] = None,
    difficulty: Optional[str] = None,
) -> list[Problem]:
    """AND together whichever filters are given."""
    filtered = problems
    if role:
        filtered = [p for p in filtered if role in p.roles]
    if company:
        filtered = [p for p in filtered if company in p.company_style]
    if difficulty:
        filtered = [p for p in filtered if p.difficulty == difficulty]
    return filtered


def pick_problem(
    problems: list[Problem],
    role: Optional[str] = None,
    company: Optional[str] = None,
    difficulty: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Problem:
    filtered = filter_problems(problems, role=role, company=company, difficulty=difficulty)
    if not filtered:
        raise NotFound("No matching problem")
    return (rng or random).choice(filtered)


def build_generation_prompt(company: str, difficulty: str, role: str) -> str:
    return f"""
Generate ONE ORIGINAL coding interview problem as strict JSON.

Tailor it to:
- Company style: "{company}"
- Difficulty: "{difficulty}"
- Role/seniority: "{role}"

Rules:
- Must be original. Do NOT copy or paraphrase LeetCode or any other site.
- It should feel like a realistic {company}-style interview question for a {difficulty} {role}.
- The candidate implements a function named `solve`; test inputs are passed to it as arguments.
- Include 3-5 test cases that match the description.
- Output ONLY valid JSON matching this schema (no markdown, no comments, no backticks):

{{
  "id": "string-lowercase-with-dashes",
  "title": "Short descriptive title",
  "prompt": "Full problem statement, clear and self-contained.",
  "functionSignature": "Suggested function signature or description",
  "topics": ["arrays", "hashmap"],
  "difficulty": "easy|medium|hard",
  "roles": ["intern","newgrad","swe1"],
  "companyStyle": ["google","meta","amazon","generic"],
  "constraints": "Key constraints and input bounds.",
  "tests": [
    {{
      "description": "what this test checks",
      "input": {{ "example": "shape depends on problem" }},
      "expected": "expected output here"
    }}
  ]
}}
"""


def _string_list(value: Any, default: list[str]) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return default
    cleaned = [str(v).strip().lower() for v in value if str(v).strip()]
    return cleaned or default


def normalize_generated_problem(payload: Any, company: str, difficulty: str, role: str) -> Problem:
    """Validate required fields and coerce the optional ones."""
    if not isinstance(payload, dict) or any(not payload.get(k) for k in REQUIRED_FIELDS):
        raise UpstreamFormatError("Generated problem missing required fields", raw=payload)

    tests = payload["tests"]
    if not isinstance(tests, list) or not all(isinstance(t, dict) for t in tests):
        raise UpstreamFormatError("Generated problem missing required fields", raw=payload)

    generated_difficulty = str(payload.get("difficulty") or "").strip().lower()
    topics = payload.get("topics")

    normalized = {
        "id": str(payload["id"]).strip(),
        "title": str(payload["title"]).strip(),
        "prompt": str(payload["prompt"]).strip(),
        "functionSignature": payload.get("functionSignature") or None,
        "topics": [str(t) for t in topics] if isinstance(topics, list) else [],
        "difficulty": generated_difficulty if generated_difficulty in DIFFICULTIES else difficulty,
        "roles": _string_list(payload.get("roles"), [role]),
        "companyStyle": _string_list(payload.get("companyStyle"), [company]),
        "constraints": str(payload["constraints"]) if payload.get("constraints") else None,
        "tests": [
            {
                "description": str(t.get("description") or ""),
                "input": t.get("input"),
                "expected": t.get("expected"),
            }
            for t in tests
        ],
    }
    try:
        return Problem.model_validate(normalized)
    except PydanticValidationError as e:
        raise UpstreamFormatError("Generated problem missing required fields", raw=payload) from e


def parse_generated_problem(content: str, company: str, difficulty: str, role: str) -> Problem:
    trimmed = strip_code_fences(content)
    try:
        payload = json.loads(trimmed)
    except json.JSONDecodeError as e:
        raise UpstreamFormatError("Model response was not valid JSON", raw=trimmed) from e
    return normalize_generated_problem(payload, company, difficulty, role)


async def generate_problem(
    llm: LLMClient,
    company: Optional[str] = None,
    difficulty: Optional[str] = None,
    role: Optional[str] = None,
) -> Problem:
    """Ask the LLM for one problem tailored to company, difficulty and role."""
    company = (company or "generic").lower()
    difficulty = (difficulty or "medium").lower()
    role = (role or "newgrad").lower()

    messages = [
        {"role": "system", "content": GENERATION_SYSTEM_PROMPT},
        {"role": "user", "content": build_generation_prompt(company, difficulty, role)},
    ]
    content = await llm.acomplete(messages, temperature=0.4, json_mode=True)
    problem = parse_generated_problem(content, company, difficulty, role)
    logger.info("[Problems] generated %s (%s, %s, %s)", problem.id, company, difficulty, role)
    return problem
