"""Display-level quote objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class QuoteItem:
    """Minimal projection of a quote used for display."""

    author: str
    content: str
    tags: Tuple[str, ...] = ()

    @property
    def display_tags(self) -> str:
        return ", ".join(self.tags)

    def same_identity(self, other: "QuoteItem") -> bool:
        """Two items denote the same quote when author and content match.

        List reconcilers use this to decide whether a row moved or was replaced;
        ``same_content`` then decides whether the row needs re-rendering.
        """
        return self.author == other.author and self.content == other.content

    def same_content(self, other: "QuoteItem") -> bool:
        return self == other
