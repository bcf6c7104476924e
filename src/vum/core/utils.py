"""Path display, output truncation, dot-leader padding."""

from __future__ import annotations

from pathlib import Path

MAX_OUTPUT_LINES = 20


def short_path(p: Path) -> str:
    """Return path relative to home directory, using ~ prefix."""
    try:
        rel = p.relative_to(Path.home())
        return f"~/{rel}" if str(rel) != "." else "~"
    except ValueError:
        return str(p)


def truncate_lines(text: str, max_lines: int = MAX_OUTPUT_LINES) -> str:
    """Keep the last *max_lines* lines of tool output (errors come last)."""
    lines = text.splitlines()
    if len(lines) <= max_lines:
        return text
    dropped = len(lines) - max_lines
    return f"... [{dropped} lines omitted]\n" + "\n".join(lines[-max_lines:])


def dot_leader(width: int, used: int, minimum: int = 4) -> str:
    """Dots filling a column of *width* after *used* characters, never fewer than *minimum*."""
    return "." * max(minimum, width - used)
