# This file makes the 'morphgen' directory a Python package.

from morphgen.glossed_word import GlossedWord, RuleResult
from morphgen.rules import Rule, MorphRule, ReplaceRule
from morphgen.paradigm import Paradigm, expand_affix
from morphgen.loader import compile_rules, compile_paradigms, load_rule_file, load_paradigm_file
from morphgen.generator import MorphGen
from morphgen.diagnostics import (
    DiagnosticSink,
    MorphGenError,
    MalformedRuleSyntax,
    UnboundVariableReference,
    UnknownPartOfSpeech,
    MatchLimitExceeded,
    ResourceLoadError,
)

__all__ = [
    'GlossedWord',
    'RuleResult',
    'Rule',
    'MorphRule',
    'ReplaceRule',
    'Paradigm',
    'expand_affix',
    'compile_rules',
    'compile_paradigms',
    'load_rule_file',
    'load_paradigm_file',
    'MorphGen',
    'DiagnosticSink',
    'MorphGenError',
    'MalformedRuleSyntax',
    'UnboundVariableReference',
    'UnknownPartOfSpeech',
    'MatchLimitExceeded',
    'ResourceLoadError',
]
