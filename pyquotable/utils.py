"""Small helpers shared across pyquotable."""

from __future__ import annotations

from typing import Optional


def underscore_to_camelcase(word: str, initial_capital: bool = False) -> str:
    """Transform snake_case to camelCase (``author_slug`` -> ``authorSlug``)."""
    words = [x.capitalize() or "_" for x in word.split("_")]
    if not initial_capital:
        words[0] = words[0].lower()

    return "".join(words)


def env_flag(value: Optional[str]) -> bool:
    """Interpret an environment variable as a boolean switch."""
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}
