from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

from pyquotable.utils import underscore_to_camelcase


def _env_extra_mode(default: str = "ignore") -> str:
    """
    Determine the extra-mode from environment vars.

    QUOTABLE_EXTRA: allow|forbid|ignore
    Convenience booleans: "true/1/on" -> forbid (strict), "false/0/off" -> allow
    """
    raw = (os.getenv("QUOTABLE_EXTRA") or default).strip().lower()

    if raw in {"allow", "forbid", "ignore"}:
        return raw

    if raw in {"1", "true", "yes", "on", "strict"}:
        return "forbid"
    if raw in {"0", "false", "no", "off", "lenient"}:
        return "allow"

    return default


_EXTRA = _env_extra_mode()


class QuotableModel(BaseModel):
    """
    Project-wide base model for Quotable wire payloads.

    Field names are snake_case in Python and camelCase on the wire. Unknown
    fields are ignored by default; tighten at runtime before import with:
      export QUOTABLE_EXTRA=forbid   # or allow/ignore
    """

    model_config = ConfigDict(
        alias_generator=underscore_to_camelcase,
        populate_by_name=True,
        extra=_EXTRA,  # 'forbid' | 'allow' | 'ignore'
    )


__all__ = ["QuotableModel", "_env_extra_mode"]
