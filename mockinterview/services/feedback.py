"""AI feedback on a submitted solution."""
import json
import logging
import re
from typing import Any, Optional

from mockinterview.schemas.feedback import FeedbackResult
from mockinterview.services.evaluator import percentage
from mockinterview.services.llm import LLMClient, strip_code_fences

logger = logging.getLogger(__name__)

TEST_WEIGHT = 6
AI_WEIGHT = 4

SCORE_LINE = re.compile(r"^\s*SCORE:\s*(\d{1,3})\s*$", re.MULTILINE)
SCORE_LOOSE = re.compile(r"score\s*[:=]\s*(\d{1,3})", re.IGNORECASE)
SCORE_OUT_OF_100 = re.compile(r"(\d{1,3})\s*/\s*100")

SINGLE_PASS_SYSTEM_PROMPT = (
    "You are a senior software engineer conducting a coding interview.\n"
    "- Use ONLY the provided problem, candidate code, and test results as ground truth.\n"
    "- Do NOT claim to be from any specific company.\n"
    "- Be concise, clear, and structured.\n"
    "- Do NOT invent tests or behavior that are not shown.\n"
)

SOLUTION_SYSTEM_PROMPT = (
    "You are a senior software engineer writing the reference answer for an interview problem.\n"
    "- Write the most efficient idiomatic solution you can.\n"
    "- The entry point must be a function named solve.\n"
    "- Respond with code only, no explanations.\n"
)

COMPARISON_SYSTEM_PROMPT = (
    "You are a senior software engineer reviewing a candidate's interview solution.\n"
    "- Compare the candidate's code to the optimal solution you are given.\n"
    "- Write exactly 3 short paragraphs, under 200 words in total, with no bullet points or headings.\n"
    "- Cover correctness, time/space complexity, and code quality.\n"
    "- End with a final line of the form SCORE: <integer from 0 to 100>.\n"
)


def problem_context(problem: dict) -> str:
    topics = problem.get("topics") or []
    return (
        f"Title: {problem.get('title', '')}\n"
        f"Prompt: {problem.get('prompt', '')}\n"
        f"Constraints: {problem.get('constraints') or 'N/A'}\n"
        f"Topics: {', '.join(str(t) for t in topics)}"
    )


def score_from_tests(eval_result: dict) -> int:
    """Use the evaluator's score, recomputing it from the counts if absent."""
    score = eval_result.get("score")
    if isinstance(score, int) and not isinstance(score, bool):
        return max(0, min(100, score))
    passed = eval_result.get("passedCount")
    total = eval_result.get("totalTests")
    if isinstance(passed, int) and isinstance(total, int) and total > 0:
        return percentage(passed, total)
    return 0


def parse_score(text: str) -> Optional[int]:
    """Best-effort extraction of a 0-100 score from free text."""
    for pattern in (SCORE_LINE, SCORE_LOOSE, SCORE_OUT_OF_100):
        matches = pattern.findall(text)
        if matches:
            return max(0, min(100, int(matches[-1])))
    return None


def blend_scores(test_score: int, ai_score: int) -> int:
    """round(test*0.6 + ai*0.4), half-up, in exact integer arithmetic."""
    return (test_score * TEST_WEIGHT + ai_score * AI_WEIGHT + 5) // 10


async def single_pass_feedback(
    llm: LLMClient,
    problem: dict,
    code: str,
    eval_result: dict,
    role: Optional[str] = None,
    company: Optional[str] = None,
) -> FeedbackResult:
    user_prompt = f"""
Role: {role or "unspecified"}
Target company style: {company or "generic"}

Problem:
{problem_context(problem)}

Candidate's code:
{code}

Test results (JSON):
{json.dumps(eval_result, indent=2)}

Please provide feedback with the following structure (plain text):

1. Correctness
- Did the solution pass the tests?
- If some tests failed or there was a runtime error, clearly explain why in 1-3 sentences.

2. Complexity
- Estimate the time and space complexity based on the code.

3. Code Quality & Communication
- Comment on readability, structure, edge cases, and how you'd feel about this in a real interview.

4. Next Steps
- 3 concrete, actionable suggestions to improve.

5. Score
- Overall rating from 1 to 5 for this round (1 = poor, 3 = borderline, 5 = strong pass).
"""
    messages = [
        {"role": "system", "content": SINGLE_PASS_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]
    feedback = await llm.acomplete(messages, temperature=0.3)
    test_score = score_from_tests(eval_result)
    return FeedbackResult(feedback=feedback, score=test_score, test_score=test_score)


async def reference_feedback(
    llm: LLMClient,
    problem: dict,
    code: str,
    eval_result: dict,
    role: Optional[str] = None,
    company: Optional[str] = None,
    language: Optional[str] = None,
) -> FeedbackResult:
    """Fetch an optimal solution, then have the model grade the candidate against it."""
    language = language or "javascript"

    solution_messages = [
        {"role": "system", "content": SOLUTION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": f"Language: {language}\n\nProblem:\n{problem_context(problem)}\n\n"
                       f"Function signature: {problem.get('functionSignature') or 'function solve(...)'}",
        },
    ]
    solution = strip_code_fences(await llm.acomplete(solution_messages, temperature=0.2))

    passed = eval_result.get("passedCount", "?")
    total = eval_result.get("totalTests", "?")
    comparison_messages = [
        {"role": "system", "content": COMPARISON_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": f"""
Role: {role or "unspecified"}
Target company style: {company or "generic"}
Language: {language}

Problem:
{problem_context(problem)}

Candidate's code:
{code}

Tests passed: {passed}/{total}

Optimal solution:
{solution}
""",
        },
    ]
    review = await llm.acomplete(comparison_messages, temperature=0.3)

    test_score = score_from_tests(eval_result)
    ai_score = parse_score(review)
    if ai_score is None:
        logger.warning("[Feedback] no score found in review; using test score %s", test_score)
        ai_score = test_score

    feedback = SCORE_LINE.sub("", review).strip()
    return FeedbackResult(
        feedback=feedback,
        solution=solution,
        score=blend_scores(test_score, ai_score),
        test_score=test_score,
        ai_score=ai_score,
    )


async def generate_feedback(
    llm: LLMClient,
    mode: str,
    problem: dict,
    code: str,
    eval_result: dict,
    role: Optional[str] = None,
    company: Optional[str] = None,
    language: Optional[str] = None,
) -> FeedbackResult:
    if mode == "single":
        return await single_pass_feedback(llm, problem, code, eval_result, role=role, company=company)
    return await reference_feedback(
        llm, problem, code, eval_result, role=role, company=company, language=language
    )


def feedback_payload(result: FeedbackResult) -> dict[str, Any]:
    return result.model_dump(by_alias=True, exclude_none=True)
