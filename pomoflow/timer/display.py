"""Pure helpers that turn raw countdown numbers into display values."""

from __future__ import annotations


def progress_percent(current_time: int, total_time: int) -> float:
    """Percent of the session already elapsed, clamped to 0-100."""
    if total_time <= 0:
        return 0.0
    elapsed = total_time - current_time
    return max(0.0, min(100.0, elapsed / total_time * 100))


def format_time(seconds: int) -> str:
    """``125`` → ``"02:05"``.  Minutes are never truncated (``"100:00"``)."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"
