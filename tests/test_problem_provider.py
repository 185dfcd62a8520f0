import asyncio
import itertools
import json
import random

import pytest

from mockinterview.errors import NotFound, UpstreamError, UpstreamFormatError
from mockinterview.services.problem_provider import (
    COMPANIES,
    DIFFICULTIES,
    ROLES,
    filter_problems,
    generate_problem,
    load_catalog,
    parse_generated_problem,
    pick_problem,
)

from conftest import FakeLLM

GENERATED = {
    "id": "rotate-playlist",
    "title": "Rotate Playlist",
    "prompt": "Rotate the playlist right by k positions.",
    "functionSignature": "function solve(songs, k)",
    "topics": ["arrays"],
    "difficulty": "Easy",
    "roles": ["newgrad"],
    "companyStyle": ["meta"],
    "constraints": "0 <= k <= 10^5",
    "tests": [
        {"description": "basic", "input": {"songs": [1, 2, 3], "k": 1}, "expected": [3, 1, 2]},
        {"description": "no-op", "input": {"songs": [1, 2], "k": 0}, "expected": [1, 2]},
        {"description": "full turn", "input": {"songs": [1, 2], "k": 2}, "expected": [1, 2]},
    ],
}


def test_catalog_problems_are_well_formed():
    catalog = load_catalog()
    assert catalog
    assert len({p.id for p in catalog}) == len(catalog)
    for problem in catalog:
        assert problem.tests
        assert problem.difficulty in DIFFICULTIES


def test_every_filter_combination_is_respected():
    catalog = load_catalog()
    for role, company, difficulty in itertools.product(ROLES + [None], COMPANIES + [None], DIFFICULTIES + [None]):
        matches = filter_problems(catalog, role=role, company=company, difficulty=difficulty)
        if not matches:
            with pytest.raises(NotFound):
                pick_problem(catalog, role=role, company=company, difficulty=difficulty)
            continue
        problem = pick_problem(catalog, role=role, company=company, difficulty=difficulty, rng=random.Random(7))
        if role:
            assert role in problem.roles
        if company:
            assert company in problem.company_style
        if difficulty:
            assert problem.difficulty == difficulty


def test_no_match_is_not_found():
    with pytest.raises(NotFound) as exc_info:
        pick_problem(load_catalog(), company="no-such-company")
    assert exc_info.value.to_payload() == {"error": "No matching problem"}


def test_parse_generated_problem_strips_fences_and_normalizes():
    content = "```json\n" + json.dumps(GENERATED) + "\n```"
    problem = parse_generated_problem(content, "meta", "easy", "newgrad")

    assert problem.id == "rotate-playlist"
    assert problem.difficulty == "easy"
    assert problem.company_style == ["meta"]
    assert len(problem.tests) == 3
    assert problem.tests[0].expected == [3, 1, 2]


def test_parse_generated_problem_fills_optional_fields():
    payload = {k: GENERATED[k] for k in ("id", "title", "prompt", "tests")}
    problem = parse_generated_problem(json.dumps(payload), "amazon", "hard", "swe1")

    assert problem.difficulty == "hard"
    assert problem.roles == ["swe1"]
    assert problem.company_style == ["amazon"]
    assert problem.topics == []
    assert problem.constraints is None


def test_parse_generated_problem_rejects_non_json():
    with pytest.raises(UpstreamFormatError) as exc_info:
        parse_generated_problem("Sure! Here is a problem: ...", "generic", "medium", "newgrad")
    assert exc_info.value.message == "Model response was not valid JSON"
    assert exc_info.value.raw.startswith("Sure!")


@pytest.mark.parametrize("missing", ["id", "title", "prompt", "tests"])
def test_parse_generated_problem_requires_fields(missing):
    payload = dict(GENERATED)
    del payload[missing]
    with pytest.raises(UpstreamFormatError) as exc_info:
        parse_generated_problem(json.dumps(payload), "generic", "medium", "newgrad")
    assert exc_info.value.message == "Generated problem missing required fields"
    assert exc_info.value.status_code == 502


def test_generate_problem_prompts_with_defaults():
    llm = FakeLLM([json.dumps(GENERATED)])
    problem = asyncio.run(generate_problem(llm, company="META"))

    assert problem.title == "Rotate Playlist"
    call = llm.calls[0]
    assert call["json_mode"] is True
    assert call["messages"][0]["role"] == "system"
    prompt = call["messages"][1]["content"]
    assert '"meta"' in prompt
    assert '"medium"' in prompt
    assert '"newgrad"' in prompt


def test_generate_problem_does_not_retry():
    llm = FakeLLM([UpstreamError("OpenRouter request failed", status=429, body="rate limited"), json.dumps(GENERATED)])
    with pytest.raises(UpstreamError):
        asyncio.run(generate_problem(llm))
    assert len(llm.calls) == 1
