"""Simulated interviewer.

There is no session object: every call receives the whole conversation so
far, keeps only the most recent turns, and produces one interviewer reply.
"""
import logging
import re
from typing import Optional

from mockinterview.errors import EmptyUpstreamResponse
from mockinterview.schemas.conversation import ConversationMessage
from mockinterview.services.llm import LLMClient

logger = logging.getLogger(__name__)

MAX_HISTORY_TURNS = 10

ACTIONS = ("start", "hint", "evaluate", "followup", "message")

FALLBACK_REPLY = "Let's continue. Can you walk me through your approach in more detail?"

SPEAKER_LABEL = re.compile(r"^\s*\**interviewer\**\s*:\s*", re.IGNORECASE)

BASE_SYSTEM_PROMPT = """
You are a strict but fair senior software engineer acting as a live coding interviewer.

Rules:
- Speak ONLY as the interviewer (never as the candidate).
- Be concise, technical, and targeted.
- Use the given coding problem as the source of truth.
- If the candidate is stuck, give gentle hints but never the full solution.
- Tailor tone slightly to a {company}-style {role} interview, but do NOT claim you represent {company}.
- Do NOT say you are an AI or language model.
- Only respond with ONE interviewer message per request.
"""

ACTION_INSTRUCTIONS = {
    "start": (
        "Open the interview. Greet the candidate in one sentence, restate the problem briefly, "
        "and ask how they would approach it before they start coding."
    ),
    "hint": (
        "The candidate asked for a hint. Give ONE small nudge in at most two sentences. "
        "Point toward an idea or data structure; never reveal the full solution and never write code."
    ),
    "evaluate": (
        "React specifically to the candidate's latest message. Say what is right, point out gaps or "
        "bugs in their reasoning or code, and ask a clarifying question if anything is ambiguous."
    ),
    "followup": (
        "Ask ONE follow-up question that probes time/space complexity, edge cases, "
        "or alternative approaches, based on their current code and discussion."
    ),
    "message": "Continue the interview naturally with targeted follow-ups.",
}

MAX_TOKENS = {"hint": 120}
DEFAULT_MAX_TOKENS = 250


def window(history: list[ConversationMessage]) -> list[ConversationMessage]:
    return list(history)[-MAX_HISTORY_TURNS:]


def strip_speaker_label(text: str) -> str:
    return SPEAKER_LABEL.sub("", text, count=1).strip()


def build_messages(
    action: str,
    problem: dict,
    history: list[ConversationMessage],
    user_message: Optional[str] = None,
    role: str = "newgrad",
    company: str = "generic",
    language: str = "javascript",
    code: Optional[str] = None,
) -> list[dict]:
    """Assemble the upstream chat for one interviewer turn."""
    if action not in ACTION_INSTRUCTIONS:
        action = "message"

    messages = [
        {
            "role": "system",
            "content": BASE_SYSTEM_PROMPT.format(company=company, role=role)
            + "\n" + ACTION_INSTRUCTIONS[action],
        },
        {
            "role": "system",
            "content": (
                f"Problem context:\nTitle: {problem.get('title')}\nPrompt: {problem.get('prompt')}\n"
                f"Constraints: {problem.get('constraints') or 'N/A'}\n"
                f"Company style: {company}\nRole: {role}\nLanguage: {language}"
            ),
        },
    ]
    if code and code.strip() and action != "start":
        messages.append({"role": "system", "content": f"Candidate's current code:\n{code}"})

    for m in window(history):
        if not m.text:
            continue
        if m.role == "candidate":
            messages.append({"role": "user", "content": f"Candidate: {m.text}"})
        else:
            messages.append({"role": "assistant", "content": f"Interviewer: {m.text}"})

    if action == "start":
        final_turn = "The candidate has joined and is ready to begin."
    elif user_message:
        final_turn = f"Latest candidate message: {user_message}"
    elif action == "hint":
        final_turn = "The candidate asks for a hint."
    else:
        final_turn = "Ask the candidate a follow-up question."
    messages.append({"role": "user", "content": final_turn})
    return messages


async def interviewer_reply(
    llm: LLMClient,
    action: str,
    problem: dict,
    history: list[ConversationMessage],
    user_message: Optional[str] = None,
    role: str = "newgrad",
    company: str = "generic",
    language: str = "javascript",
    code: Optional[str] = None,
) -> str:
    messages = build_messages(
        action,
        problem,
        history,
        user_message=user_message,
        role=role,
        company=company,
        language=language,
        code=code,
    )
    try:
        raw = await llm.acomplete(
            messages,
            temperature=0.4,
            max_tokens=MAX_TOKENS.get(action, DEFAULT_MAX_TOKENS),
        )
    except EmptyUpstreamResponse:
        logger.warning("[Interviewer] empty reply for action=%s, using fallback", action)
        return FALLBACK_REPLY
    return strip_speaker_label(raw) or FALLBACK_REPLY
