"""
The rule pattern compiler.

Turns the left-hand side of a rule into an automaton chain and each
right-hand-side alternative into a template of literal runs and variable
references.

Left-hand-side syntax:

    [name]        any run of characters, bound to `name`
    [*]           any run of characters, bound to the next positional label
    [#group]      one of the alternatives of a predeclared group
    [!a b c]      one of the inline alternatives a, b, c
    [a b c]       same as [!a b c]
    [?#group]     like [#group], but may match nothing
    [?a b c]      like [!a b c], but may match nothing
    anything else a literal character

Positional labels are "1", "2", ... in order of appearance; `[*]` and every
alternative node take one, named variables do not.
"""
import re
import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Set, Tuple

from morphgen.automaton import (
    DisjunctiveNode,
    FinalNode,
    LiteralNode,
    Node,
    OptionalDisjunctiveNode,
    VariableNode,
    chain_length,
)
from morphgen.diagnostics import DiagnosticSink, MalformedRuleSyntax, UnboundVariableReference

logger = logging.getLogger(__name__)

# A bracketed variable reference, a run of literal text, or a stray '['.
_TEMPLATE_TOKEN = re.compile(r"\[[^\[\]]*\]|[^\[]+|\[")


@dataclass(frozen=True)
class TemplateToken:
    """One piece of a right-hand side: literal text or a variable name."""

    text: str
    is_variable: bool = False


Template = Tuple[TemplateToken, ...]


@dataclass(frozen=True)
class _Step:
    """A left-hand-side element, before it is linked into a chain."""

    kind: str
    value: str = ""
    alternatives: Tuple[str, ...] = ()
    var_name: str = ""


def compile_pattern(lhs: str, groups: Mapping[str, Sequence[str]], name: str = "",
                    sink: Optional[DiagnosticSink] = None) -> Tuple[Node, Set[str]]:
    """
    Compile a left-hand side into an automaton chain.

    Args:
        lhs: The pattern, already normalized by the loader.
        groups: Group table for `[#name]` references.
        name: Rule name used in diagnostics.
        sink: Receives non-fatal syntax problems.

    Returns:
        The start node of the chain and the set of variable names it binds.
    """
    if sink is None:
        sink = DiagnosticSink()
    steps = _scan(lhs, groups, name, sink)

    node: Node = FinalNode()
    for step in reversed(steps):
        if step.kind == 'literal':
            node = LiteralNode(step.value, node)
        elif step.kind == 'variable':
            node = VariableNode(step.var_name, node)
        elif step.kind == 'optional':
            node = OptionalDisjunctiveNode(step.alternatives, step.var_name, node)
        else:
            node = DisjunctiveNode(step.alternatives, step.var_name, node)

    declared = {step.var_name for step in steps if step.kind != 'literal'}
    logger.debug(f"Compiled {lhs!r} into {chain_length(node)} nodes")
    return node, declared


def _scan(lhs: str, groups, name: str, sink: DiagnosticSink) -> List[_Step]:
    steps = []
    var_count = 1
    i = 0
    while i < len(lhs):
        c = lhs[i]
        if c != '[':
            steps.append(_Step('literal', c))
            i += 1
            continue

        j = lhs.find(']', i)
        if j < 0:
            sink.report(MalformedRuleSyntax(f"No closing bracket for variable {lhs[i:]!r}"), name)
            steps.append(_Step('literal', c))
            i += 1
            continue

        var_name = lhs[i + 1:j]
        if not var_name:
            sink.report(MalformedRuleSyntax(f"Empty variable at position {i}"), name)
            steps.append(_Step('literal', c))
            i += 1
            continue

        optional = var_name[0] == '?'
        group = var_name[0] == '#' or (optional and var_name[1:2] == '#')
        loose = var_name[0] == '!' or (optional and not group) or ' ' in var_name

        if optional or group or loose:
            if var_name[0] in '?!':
                var_name = var_name[1:]
            if group:
                if var_name in groups:
                    alternatives = tuple(groups[var_name])
                else:
                    sink.report(MalformedRuleSyntax(f"Couldn't find group {var_name}"), name)
                    alternatives = ()
            else:
                alternatives = tuple(var_name.split(' '))
            kind = 'optional' if optional else 'disjunctive'
            steps.append(_Step(kind, alternatives=alternatives, var_name=str(var_count)))
            var_count += 1
        else:
            if var_name == '*':
                var_name = str(var_count)
                var_count += 1
            steps.append(_Step('variable', var_name=var_name))
        i = j + 1
    return steps


def compile_template(rhs: str) -> Template:
    """Split a right-hand side into literal runs and `[name]` references."""
    tokens = []
    for piece in _TEMPLATE_TOKEN.findall(rhs):
        if len(piece) > 1 and piece.startswith('[') and piece.endswith(']'):
            tokens.append(TemplateToken(piece[1:-1], True))
        else:
            tokens.append(TemplateToken(piece))
    return tuple(tokens)


def compile_templates(rhs: Sequence[str], declared: Set[str], name: str = "",
                      sink: Optional[DiagnosticSink] = None) -> Tuple[Template, ...]:
    """Compile every right-hand-side alternative, flagging references the pattern never binds."""
    if sink is None:
        sink = DiagnosticSink()
    templates = tuple(compile_template(alternative) for alternative in rhs)
    for template in templates:
        for token in template:
            if token.is_variable and token.text not in declared:
                sink.report(UnboundVariableReference(f"Variable {token.text} is not bound by the pattern"), name)
    return templates
