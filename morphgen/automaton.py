"""
Rule automata and the backtracking matcher.

A compiled left-hand side is a linear chain of immutable nodes ending in a
FinalNode. Matching walks the chain against an input string, backtracking
over variable split points and disjunctive alternatives. Per-call state
(variable bindings, the boundary-marker trace, the step budget) is passed in
explicitly, so one chain can be shared by any number of callers.

The same chain accepts both the typed form (`pa_la;m|PL`) and the blank-marked
gloss (`pa_la;m PL`): a blank in the input stands in for a boundary-marker
literal, and the marker it stood for is recorded in the trace.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from morphgen.diagnostics import MatchLimitExceeded

SEPARATORS = frozenset("|&<>")
BLANK = " "

# Each level costs up to three interpreter frames (match, _match_node, _match_alternatives)
DEFAULT_MAX_MATCH_DEPTH = 200


def is_separator(c: str) -> bool:
    """True for the boundary markers `|` (plain), `&` (clitic), `<` and `>` (infix)."""
    return c in SEPARATORS


@dataclass(frozen=True)
class FinalNode:
    """Accepts the end of the input, tolerating trailing boundary markers."""


@dataclass(frozen=True)
class LiteralNode:
    char: str
    next_node: "Node"


@dataclass(frozen=True)
class DisjunctiveNode:
    alternatives: Tuple[str, ...]
    var_name: str
    next_node: "Node"


@dataclass(frozen=True)
class OptionalDisjunctiveNode:
    alternatives: Tuple[str, ...]
    var_name: str
    next_node: "Node"


@dataclass(frozen=True)
class VariableNode:
    var_name: str
    next_node: "Node"


Node = Union[FinalNode, LiteralNode, DisjunctiveNode, OptionalDisjunctiveNode, VariableNode]


class MatchBudget:
    """
    Counts node visits for one match attempt and stops runaway backtracking.

    Args:
        limit: Total node visits allowed.
        max_depth: Nested node visits allowed. Every skipped boundary marker
            nests one level deeper, so this keeps long marker runs well under
            the interpreter's recursion limit.
    """

    def __init__(self, limit: int, max_depth: int = DEFAULT_MAX_MATCH_DEPTH):
        self.limit = limit
        self.max_depth = max_depth
        self.steps = 0
        self.depth = 0

    def tick(self):
        self.steps += 1
        if self.steps > self.limit:
            raise MatchLimitExceeded(f"gave up after {self.limit} matcher steps")

    def enter(self):
        self.tick()
        self.depth += 1
        if self.depth > self.max_depth:
            raise MatchLimitExceeded(f"gave up at matcher depth {self.max_depth}")

    def leave(self):
        self.depth -= 1


def match(node: Node, s: str, i: int, bindings: Dict[str, str], trace: List[str],
          budget: MatchBudget) -> bool:
    """
    Match the chain starting at `node` against `s[i:]`.

    Bindings and trace entries are only written once the rest of the chain
    has matched, i.e. along the successful path while the recursion unwinds.
    Trace entries are inserted at the front, so the finished trace lists the
    elided markers left to right.

    Raises:
        MatchLimitExceeded: if the step or depth budget runs out.
    """
    budget.enter()
    try:
        return _match_node(node, s, i, bindings, trace, budget)
    finally:
        budget.leave()


def _match_node(node, s, i, bindings, trace, budget) -> bool:
    if isinstance(node, FinalNode):
        if i >= len(s):
            return True
        return is_separator(s[i]) and match(node, s, i + 1, bindings, trace, budget)

    if isinstance(node, LiteralNode):
        if i >= len(s):
            return False
        c = s[i]
        # A blank in the gloss stands for whichever boundary marker the rule expects.
        # '<' consumes nothing: the matching '>' takes the same blank.
        if c == BLANK and is_separator(node.char):
            step = 0 if node.char == '<' else 1
            if match(node.next_node, s, i + step, bindings, trace, budget):
                trace.insert(0, node.char)
                return True
        if c == node.char and match(node.next_node, s, i + 1, bindings, trace, budget):
            return True
        return is_separator(c) and match(node, s, i + 1, bindings, trace, budget)

    if isinstance(node, (DisjunctiveNode, OptionalDisjunctiveNode)):
        if _match_alternatives(node, s, i, bindings, trace, budget):
            return True
        if isinstance(node, OptionalDisjunctiveNode) and match(node.next_node, s, i, bindings, trace, budget):
            bindings[node.var_name] = ""
            return True
        return False

    if isinstance(node, VariableNode):
        # Shortest split first: this decides which derivation wins.
        for j in range(i, len(s) + 1):
            if match(node.next_node, s, j, bindings, trace, budget):
                bindings[node.var_name] = s[i:j]
                return True
        return False

    raise TypeError(f"Unknown automaton node: {node!r}")


def _match_alternatives(node, s, i, bindings, trace, budget) -> bool:
    if i >= len(s):
        return False
    for alternative in node.alternatives:
        if s.startswith(alternative, i) and match(node.next_node, s, i + len(alternative), bindings, trace, budget):
            bindings[node.var_name] = alternative
            return True
    # Skip over a boundary marker and retry the whole node (optional fallback included).
    return is_separator(s[i]) and match(node, s, i + 1, bindings, trace, budget)


def chain_length(node: Node) -> int:
    """Number of nodes in a chain, FinalNode included."""
    length = 1
    while not isinstance(node, FinalNode):
        node = node.next_node
        length += 1
    return length
