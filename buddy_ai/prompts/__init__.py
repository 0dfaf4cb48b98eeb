"""System prompt loading.

Prompts live in ``prompts/<locale>/`` as markdown. ``{current_datetime}`` in
the text is replaced with the current UTC time when a conversation is
seeded, so the model can reason about "latest" and "today".
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


PROMPTS_DIR = Path(__file__).resolve().parent


def load_system_prompt(locale: str = "en", now: Optional[datetime] = None) -> str:
    fname = PROMPTS_DIR / locale / "assistant_system.md"
    text = fname.read_text(encoding="utf-8")
    current = (now or datetime.now(timezone.utc)).strftime("%a, %d %b %Y %H:%M:%S GMT")
    return text.replace("{current_datetime}", current)
