from typing import Literal

from pydantic import BaseModel


class ConversationMessage(BaseModel):
    role: Literal["interviewer", "candidate"]
    text: str

    @classmethod
    def from_wire(cls, raw: dict) -> "ConversationMessage":
        """Accept both ``{from, text}`` and ``{role, content}`` shapes."""
        speaker = str(raw.get("from") or raw.get("role") or "").lower()
        text = raw.get("text")
        if text is None:
            text = raw.get("content")
        role = "candidate" if speaker in ("candidate", "user") else "interviewer"
        return cls(role=role, text=str(text or ""))
