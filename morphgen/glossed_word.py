"""Value types passed between rules and the generation pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class GlossedWord:
    """A gloss together with the (partially) realized form it stands for."""

    gloss: str
    form: str

    def __str__(self) -> str:
        return f"{self.gloss}\t{self.form}"


@dataclass(frozen=True)
class RuleResult:
    """
    Outcome of a successful rule application.

    updated_gloss carries the boundary markers the match resolved,
    matched_form is the form the rule was applied to, and outputs holds one
    rewritten form per right-hand-side alternative, in rule order.
    """

    updated_gloss: str
    matched_form: str
    outputs: Tuple[str, ...]
