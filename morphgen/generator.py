"""
The generation pipeline.

MorphGen owns an ordered rule list and, optionally, the paradigms of a
language. Generation pushes a set of candidate glossed words through the
rules one wave at a time: every candidate is offered to rule k, a match
replaces it with one candidate per right-hand-side alternative, and a
non-match passes it on unchanged. Candidates whose form still contains an
unrealized gloss token are dropped at the end.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Pattern, Set, Union

from morphgen.config import MorphGenConfig
from morphgen.diagnostics import DiagnosticSink, UnknownPartOfSpeech
from morphgen.glossed_word import GlossedWord
from morphgen.loader import NEVER_MATCHING, load_paradigm_file, load_rule_file
from morphgen.paradigm import Paradigm
from morphgen.rules import Rule

logger = logging.getLogger(__name__)


class MorphGen:
    """
    A morphology generator which can inflect words and create complete
    paradigms for them.

    Usage:
        gen = MorphGen.from_files("data/mal-rules-simple.tsv", "data/mal-affixes.tsv")
        gen.generate("ka.tal GEN")          # {GlossedWord('ka.tal|GEN', 'ka.tal|in_re')}
        gen.get_paradigm("puucca", "ntest")
    """

    def __init__(self, rules: Iterable[Rule], paradigms: Optional[Dict[str, Paradigm]] = None,
                 gloss_pattern: Optional[Pattern] = None):
        """
        Args:
            rules: The rules, in order of application.
            paradigms: POS label to paradigm.
            gloss_pattern: Matches forms that still carry a gloss token.
                Never matches when omitted.
        """
        self.rules: List[Rule] = list(rules)
        self.paradigms: Dict[str, Paradigm] = dict(paradigms or {})
        self.gloss_pattern = gloss_pattern if gloss_pattern is not None else NEVER_MATCHING

    @classmethod
    def from_files(cls, rule_file, paradigm_file=None, config: Optional[MorphGenConfig] = None,
                   sink: Optional[DiagnosticSink] = None) -> "MorphGen":
        """
        Build a generator from a rule file and an optional paradigm file.

        Raises:
            ResourceLoadError: if either file cannot be read.
        """
        config = config or MorphGenConfig()
        rules = load_rule_file(rule_file, sink=sink, max_match_steps=config.max_match_steps)
        if paradigm_file is None:
            return cls(rules)
        paradigms, pattern = load_paradigm_file(paradigm_file, sink=sink)
        return cls(rules, paradigms, pattern)

    def generate(self, ins: Union[str, Iterable[GlossedWord]],
                 sink: Optional[DiagnosticSink] = None) -> Set[GlossedWord]:
        """
        Generate realizations for a gloss, or for a set of glossed words.

        Args:
            ins: A raw gloss (treated as its own initial form) or glossed words.
            sink: Receives non-fatal problems met while applying rules.

        Returns:
            The realizations that no longer carry gloss tokens.
        """
        if sink is None:
            sink = DiagnosticSink()
        if isinstance(ins, str):
            outs = {GlossedWord(ins, ins)}
        else:
            outs = set(ins)

        for rule in self.rules:
            wave, outs = outs, set()
            for word in wave:
                result = rule.apply(word.gloss, word.form, sink)
                if result is None:
                    outs.add(word)
                else:
                    outs.update(GlossedWord(result.updated_gloss, out) for out in result.outputs)

        realized = {word for word in outs if not self.gloss_pattern.search(word.form)}
        logger.debug(f"Generated {len(realized)} of {len(outs)} candidates")
        return realized

    def get_paradigm(self, word: str, pos: str, sink: Optional[DiagnosticSink] = None) -> Set[str]:
        """
        Get the paradigm of possible glosses for a raw word.

        An unknown POS is reported to the sink and yields just the word.
        """
        paradigm = self.paradigms.get(pos)
        if paradigm is not None:
            return paradigm.get_paradigm(word)
        if sink is None:
            sink = DiagnosticSink()
        sink.report(UnknownPartOfSpeech(f"Unknown POS: {pos}"), word)
        return {word}

    def get_inflections(self, word: str, pos: str, sink: Optional[DiagnosticSink] = None) -> Set[GlossedWord]:
        """Get every realized inflection of a raw word."""
        inflections: Set[GlossedWord] = set()
        for gloss in self.get_paradigm(word, pos, sink):
            inflections |= self.generate(gloss, sink)
        return inflections
