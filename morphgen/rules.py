"""
Rules: a compiled pattern plus the templates that rewrite what it matched.

MorphRule is the pattern-matching rule; ReplaceRule is the plain literal
substitution selected by a leading `*` in rule files. Both return a
RuleResult, or None when they do not apply.
"""
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from morphgen.automaton import BLANK, DEFAULT_MAX_MATCH_DEPTH, MatchBudget, match
from morphgen.compiler import Template, compile_pattern, compile_templates
from morphgen.config import DEFAULT_MAX_MATCH_STEPS
from morphgen.diagnostics import DiagnosticSink, MatchLimitExceeded, UnboundVariableReference
from morphgen.glossed_word import RuleResult
from morphgen.logging_config import log_with_context

logger = logging.getLogger(__name__)


class Rule:
    """Common interface of all rules."""

    def __init__(self, name: str = "<?>"):
        self.name = name

    def apply(self, orig: str, form: Optional[str] = None,
              sink: Optional[DiagnosticSink] = None) -> Optional[RuleResult]:
        """
        Apply the rule.

        Args:
            orig: The gloss the form was derived from.
            form: The current form (defaults to `orig`).
            sink: Receives non-fatal problems met while applying the rule.

        Returns:
            The rule result, or None if the rule does not apply.
        """
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class MorphRule(Rule):
    """
    A morphological rule converting a glossed word into the represented form.

    Args:
        lhs: Accepted input of the rule (see morphgen.compiler for the syntax).
        rhs: Produced outputs of the rule, one template per alternative.
        groups: Predefined groups the pattern may reference.
        name: Name used in diagnostics.
        max_match_steps: Step budget for a single match attempt.
        max_match_depth: Nesting budget for a single match attempt.
        sink: Receives diagnostics raised while compiling.
    """

    def __init__(self, lhs: str, rhs: Sequence[str], groups: Optional[Mapping[str, Sequence[str]]] = None,
                 name: str = "", max_match_steps: int = DEFAULT_MAX_MATCH_STEPS,
                 max_match_depth: int = DEFAULT_MAX_MATCH_DEPTH,
                 sink: Optional[DiagnosticSink] = None):
        super().__init__(name or lhs)
        if sink is None:
            sink = DiagnosticSink()
        self.lhs = lhs
        self.max_match_steps = max_match_steps
        self.max_match_depth = max_match_depth
        self.start, declared = compile_pattern(lhs, groups or {}, self.name, sink)
        self.templates = compile_templates(rhs, declared, self.name, sink)

    def apply(self, orig, form=None, sink=None):
        if form is None:
            form = orig
        if sink is None:
            sink = DiagnosticSink()

        bindings: Dict[str, str] = {}
        trace: List[str] = []
        budget = MatchBudget(self.max_match_steps, self.max_match_depth)
        try:
            matched = match(self.start, form, 0, bindings, trace, budget)
        except MatchLimitExceeded as e:
            sink.report(e, self.name)
            return None
        if not matched:
            return None

        outputs = tuple(self._expand(template, bindings, sink) for template in self.templates)
        log_with_context(f"Rule {self.name!r} matched {form!r}", {
            'bindings': bindings,
            'markers': "".join(trace),
            'outputs': outputs,
        })
        return RuleResult(fill_separators(orig, trace), form, outputs)

    def _expand(self, template: Template, bindings: Mapping[str, str], sink: DiagnosticSink) -> str:
        parts = []
        for token in template:
            if not token.is_variable:
                parts.append(token.text)
            elif token.text in bindings:
                parts.append(bindings[token.text])
            else:
                sink.report(UnboundVariableReference(f"Couldn't find variable {token.text}"), self.name)
        return "".join(parts)


class ReplaceRule(Rule):
    """
    Literal substitution: every occurrence of `lhs` in the form is replaced,
    once per right-hand-side alternative. The gloss is left untouched.
    """

    def __init__(self, lhs: str, rhs: Sequence[str], name: str = ""):
        super().__init__(name or f"*{lhs}")
        self.lhs = lhs
        self.rhs = tuple(rhs)

    def apply(self, orig, form=None, sink=None):
        if form is None:
            form = orig
        if not self.lhs or self.lhs not in form:
            return None
        return RuleResult(orig, form, tuple(form.replace(self.lhs, alternative) for alternative in self.rhs))


def fill_separators(word: str, trace: Sequence[str]) -> str:
    """
    Write the markers recorded during a match into the blanks of `word`.

    Markers fill blanks left to right. A `<` fills its blank with `<>` and
    uses up the `>` entry that follows it. Markers left over once the blanks
    run out are dropped.
    """
    filled = []
    i = 0
    s = 0
    while s < len(trace):
        j = word.find(BLANK, i)
        if j >= 0:
            filled.append(word[i:j])
            filled.append(trace[s])
            if trace[s] == '<':
                filled.append('>')
                s += 1
            i = j + 1
        s += 1
    filled.append(word[i:])
    return "".join(filled)


if __name__ == '__main__':
    # Worked examples from Finnish, Arabic and Ryka
    word = "joki{gensg=joen}{parsg=jokea}{parpl=jokia}{vh=a}"
    fin_gen = MorphRule("[*]{gensg=[genstem]n}[*]|GEN", ["[genstem]|n"])
    fin_ine = MorphRule("[*]{gensg=[genstem]n}[*]{vh=[A]}|INE", ["[genstem]|ss[A]"])
    print(f"FINNISH: {word}")
    print(f"  |GEN -> {fin_gen.apply(word + '|GEN').outputs[0]}")
    print(f"  |INE -> {fin_ine.apply(word + '|INE').outputs[0]}")

    ara = MorphRule("[C1]a[C2]a[C3]a{th=[th]}&IPF&1SG", ["ja[C1][C2][th][C3]u"])
    print(f"ARABIC: kataba{{th=u}}&IPF&1SG -> {ara.apply('kataba{th=u}&IPF&1SG').outputs[0]}")

    ryk_groups = {
        "#C": ["kh", "th", "ph", "sh", "h", "k", "t", "p", "r", "q", "g", "d", "b", "l"],
        "#V": ["a", "e", "o", "u", "y", "n"],
    }
    ryk = MorphRule("[stem][#C][#V][#C]<>PC", ["[stem][1][2]<[1][2]>[3]"], ryk_groups)
    print(f"RYKA: hethel<>PC -> {ryk.apply('hethel<>PC').outputs[0]}")
