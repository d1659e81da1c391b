"""
Paradigms and the affix expression expander.

An affix expression describes the prefixes or suffixes a part of speech can
take, as a sequence of blank-separated tokens and parenthesized alternations:

    PL (NOM || ACC || GEN)

Everything after any point of an expression is optional, so the example
expands to "", NOM, ACC, GEN, PL, PL NOM, PL ACC and PL GEN. An underscore
inside a token is a blank that does not split it (`PST_STAT` is the single
affix "PST STAT").
"""
from __future__ import annotations

import re
import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Set

from morphgen.diagnostics import DiagnosticSink, MalformedRuleSyntax

logger = logging.getLogger(__name__)

ALTERNATION = " || "

# Characters that delimit gloss tokens in an affix expression
_SPECIAL_CHARS = re.compile(r"[()| _]+")


def expand_affix(expression: str, sink: Optional[DiagnosticSink] = None) -> Set[str]:
    """
    Unfold a prefix or suffix expression into the set of affixes it describes.

    The empty string is always part of the result.
    """
    if sink is None:
        sink = DiagnosticSink()
    out = {""}
    expression = expression.strip()
    if not expression:
        return out

    if expression.startswith("("):
        x = find_closing_bracket(expression, 1)
        if x < 0:
            sink.report(MalformedRuleSyntax(f"No closing bracket in {expression!r}"))
            return out
        rest = expand_affix(expression[x + 1:], sink)
        for item in split_low_level(expression[1:x], ALTERNATION):
            for head in expand_affix(item, sink):
                for tail in rest:
                    out.add(f"{head} {tail}".strip())
        return out

    head, _, tail = expression.partition(" ")
    head = head.replace("_", " ")
    rest = expand_affix(tail, sink)
    out |= rest
    for other in rest:
        out.add(f"{head} {other}".strip())
    return out


def find_closing_bracket(s: str, start: int) -> int:
    """Index of the `)` closing the bracket opened just before `start`, or -1."""
    level = 0
    for i in range(start, len(s)):
        if s[i] == "(":
            level += 1
        elif s[i] == ")":
            if level == 0:
                return i
            level -= 1
    return -1


def split_low_level(s: str, sep: str) -> List[str]:
    """Split `s` on `sep`, ignoring separators nested inside brackets."""
    splits = []
    level = 0
    prev = 0
    i = 0
    while i < len(s):
        if s[i] == "(":
            level += 1
        elif s[i] == ")":
            level -= 1
        elif level == 0 and s.startswith(sep, i):
            splits.append(s[prev:i])
            prev = i + len(sep)
            i = prev
            continue
        i += 1
    splits.append(s[prev:])
    return splits


def gloss_tokens(expression: str) -> Set[str]:
    """The individual gloss labels mentioned in an affix expression."""
    return {token for token in _SPECIAL_CHARS.split(expression) if token}


@dataclass(frozen=True)
class Paradigm:
    """All the possible inflections (on gloss level) for one part of speech."""

    prefixes: FrozenSet[str]
    suffixes: FrozenSet[str]

    @classmethod
    def from_expressions(cls, prefix: str, suffix: str,
                         sink: Optional[DiagnosticSink] = None) -> "Paradigm":
        """Create a paradigm from prefix and suffix expressions."""
        return cls(frozenset(expand_affix(prefix, sink)), frozenset(expand_affix(suffix, sink)))

    @classmethod
    def from_affixes(cls, prefixes: Iterable[str], suffixes: Iterable[str]) -> "Paradigm":
        """Create a paradigm from explicit affix sets; the empty affix is always added."""
        return cls(frozenset(prefixes) | {""}, frozenset(suffixes) | {""})

    def get_paradigm(self, word: str) -> Set[str]:
        """Every gloss the word can take in this paradigm."""
        return {
            f"{prefix} {word} {suffix}".strip()
            for prefix in self.prefixes
            for suffix in self.suffixes
        }
