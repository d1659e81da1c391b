"""
Rule and paradigm file loading.

Rule files are tab-separated, one rule per line:

    #def	#V	(a e i o u)        group definition
    // comment                      ignored, as are blank lines
    [*];m|PL	[1];n|;na.l         LHS, RHS alternatives joined by ' || '
    [*]|NOM                         LHS only: the match is deleted
    *kk^u	kku                     leading '*': literal replacement

Paradigm files hold one `<prefix expression>[<POS>]<suffix expression>` per
line (see morphgen.paradigm).
"""
import re
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple

from morphgen.config import DEFAULT_MAX_MATCH_STEPS
from morphgen.diagnostics import DiagnosticSink, MalformedRuleSyntax, ResourceLoadError
from morphgen.paradigm import Paradigm, gloss_tokens
from morphgen.rules import MorphRule, ReplaceRule, Rule

logger = logging.getLogger(__name__)

START_WILDCARD = "[§start]"
END_WILDCARD = "[§end]"
RHS_SEPARATOR = " || "

# Matches no string at all; used while no paradigms are loaded
NEVER_MATCHING = re.compile(r"(?!x)x")

# Word boundary anchors at either end of a left-hand side
_WORD_BOUNDS = re.compile(r"(\A#)|(#\Z)")

# Two or more adjacent boundary markers mean a gloss slot was left unrealized
_STACKED_SEPARATORS = r"[|&<>][|&<>]+"


def get_start_wildcard(lhs: str) -> str:
    """
    The right-hand-side label of the leading wildcard of a left-hand side.

    Returns "" for a `#`-anchored rule, the label of a leading arbitrary
    variable if there is one, and START_WILDCARD otherwise.
    """
    if not lhs or lhs[0] == '#':
        return ""
    if lhs.startswith("[*]"):
        return "[1]"
    if lhs[0] == '[' and lhs[1:2] not in ('#', '!', '?', ''):
        x = lhs.find(']')
        if x >= 0 and ' ' not in lhs[:x]:
            return lhs[:x + 1]
    return START_WILDCARD


def normalize_rule(lhs: str, rhs: Sequence[str]) -> Tuple[str, List[str]]:
    """
    Add boundary wildcards so a rule never drops material outside its match.

    Unless anchored with `#`, a left-hand side is padded with a start and an
    end variable, and every right-hand side copies them through. The anchors
    themselves are stripped.
    """
    start = get_start_wildcard(lhs)
    if start == START_WILDCARD:
        lhs = start + lhs
    anchored_end = lhs.endswith('#')

    normalized = []
    for alternative in rhs:
        if start not in alternative:
            alternative = start + alternative
        if not anchored_end:
            alternative = alternative + END_WILDCARD
        normalized.append(alternative)

    if not anchored_end:
        lhs = lhs + END_WILDCARD
    return _WORD_BOUNDS.sub("", lhs), normalized


def parse_group_definition(line: str, sink: DiagnosticSink) -> Optional[Tuple[str, List[str]]]:
    """Parse a `#def<TAB>name<TAB>(alt1 alt2 ...)` line."""
    fields = line.split('\t')
    if len(fields) != 3 or not (fields[2].startswith('(') and fields[2].endswith(')')):
        sink.report(MalformedRuleSyntax(f"Unknown group definition format: {line!r}"))
        return None
    return fields[1], fields[2][1:-1].split(' ')


def compile_rules(lines: Iterable[str], groups: Optional[Mapping[str, Sequence[str]]] = None,
                  sink: Optional[DiagnosticSink] = None,
                  max_match_steps: int = DEFAULT_MAX_MATCH_STEPS) -> List[Rule]:
    """
    Compile rule file lines into an ordered rule list.

    Args:
        lines: Rule file lines (trailing newlines are ignored).
        groups: Groups known before the first line; `#def` lines add to a copy.
        sink: Receives non-fatal syntax problems.
        max_match_steps: Step budget for each match attempt.

    Returns:
        The rules, in order of application.
    """
    if sink is None:
        sink = DiagnosticSink()
    groups = {name: list(alternatives) for name, alternatives in (groups or {}).items()}
    rules: List[Rule] = []

    for line in lines:
        line = line.rstrip('\r\n')
        if line.startswith('#def'):
            definition = parse_group_definition(line, sink)
            if definition:
                name, alternatives = definition
                groups[name] = alternatives
            continue
        if not line.strip() or line.startswith('//'):
            continue

        fields = line.split('\t')
        if len(fields) > 2:
            sink.report(MalformedRuleSyntax(f"Unknown rule format: {line!r}"))
            continue

        lhs = fields[0]
        rhs = fields[1].split(RHS_SEPARATOR) if len(fields) == 2 else [""]
        if lhs.startswith('*'):
            rules.append(ReplaceRule(lhs[1:], rhs, name=line))
        else:
            lhs, rhs = normalize_rule(lhs, rhs)
            rules.append(MorphRule(lhs, rhs, groups, name=line, max_match_steps=max_match_steps, sink=sink))

    logger.info(f"Compiled {len(rules)} rules ({len(groups)} groups)")
    return rules


def compile_paradigms(lines: Iterable[str],
                      sink: Optional[DiagnosticSink] = None) -> Tuple[Dict[str, Paradigm], Pattern]:
    """
    Compile paradigm file lines.

    Returns:
        The POS to paradigm mapping, and a pattern that finds forms still
        carrying an unrealized gloss token (or stacked boundary markers).
        The pattern never matches if no paradigm was compiled.
    """
    if sink is None:
        sink = DiagnosticSink()
    paradigms: Dict[str, Paradigm] = {}
    glosses = set()

    for line in lines:
        line = line.rstrip('\r\n')
        if not line.strip():
            continue
        p = line.find('[')
        s = line.find(']')
        if p < 0 or s < p:
            sink.report(MalformedRuleSyntax(f"Wrong paradigm format: {line!r}"))
            continue
        prefix, pos, suffix = line[:p], line[p + 1:s], line[s + 1:]
        paradigms[pos] = Paradigm.from_expressions(prefix, suffix, sink)
        glosses |= gloss_tokens(prefix) | gloss_tokens(suffix)

    logger.info(f"Compiled {len(paradigms)} paradigms ({len(glosses)} gloss tokens)")
    if not paradigms:
        return paradigms, NEVER_MATCHING
    return paradigms, gloss_pattern(glosses)


def gloss_pattern(glosses: Iterable[str]) -> Pattern:
    """Pattern finding any of the gloss tokens, or stacked boundary markers, in a form."""
    # Longest first, so that a token's prefix never shadows it
    escaped = [re.escape(g.replace('_', ' ')) for g in sorted(glosses, key=lambda g: (-len(g), g))]
    return re.compile("|".join(escaped + [_STACKED_SEPARATORS]))


def read_lines(path) -> List[str]:
    """
    Read a UTF-8 resource file.

    Raises:
        ResourceLoadError: if the file cannot be read.
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceLoadError(f"Could not read {path}: {e}") from e


def load_rule_file(path, sink: Optional[DiagnosticSink] = None,
                   max_match_steps: int = DEFAULT_MAX_MATCH_STEPS) -> List[Rule]:
    """Read and compile a rule file."""
    logger.info(f"Loading rules from {path}")
    return compile_rules(read_lines(path), sink=sink, max_match_steps=max_match_steps)


def load_paradigm_file(path, sink: Optional[DiagnosticSink] = None) -> Tuple[Dict[str, Paradigm], Pattern]:
    """Read and compile a paradigm file."""
    logger.info(f"Loading paradigms from {path}")
    return compile_paradigms(read_lines(path), sink=sink)
