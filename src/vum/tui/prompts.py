"""Interactive prompts: proceed gate, plugin selection."""

from __future__ import annotations

from prompt_toolkit import prompt as pt_prompt


def confirm(message: str = "Proceed [y/n] ? ") -> bool:
    """Ask a yes/no question; only ``y``/``yes`` (any case) count as yes."""
    try:
        answer = pt_prompt(message)
    except (EOFError, KeyboardInterrupt):
        return False
    return answer.strip().lower() in ("y", "yes")


def ask(message: str) -> str:
    """Free-form answer; empty on EOF or Ctrl-C."""
    try:
        return pt_prompt(message).strip()
    except (EOFError, KeyboardInterrupt):
        return ""
