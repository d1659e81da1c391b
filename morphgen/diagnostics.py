"""
Error taxonomy and the diagnostic side-channel.

Malformed rules, unbound template variables and unknown parts of speech are
not fatal: they are reported to a DiagnosticSink, which keeps a structured
record and logs a warning. Only ResourceLoadError is ever raised to callers.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


class MorphGenError(Exception):
    """Base class for all morphgen errors."""


class MalformedRuleSyntax(MorphGenError):
    """Bad bracket nesting, unknown group or unparseable definition line."""


class UnboundVariableReference(MorphGenError):
    """A right-hand side refers to a variable the match never bound."""


class UnknownPartOfSpeech(MorphGenError):
    """No paradigm is registered for the requested part of speech."""


class MatchLimitExceeded(MorphGenError):
    """A single match attempt used up its step budget."""


class ResourceLoadError(MorphGenError):
    """A rule or paradigm file could not be read."""


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal problem, as recorded by a DiagnosticSink."""

    kind: str
    source: str
    message: str

    def __str__(self) -> str:
        if self.source:
            return f"{self.kind} in {self.source}: {self.message}"
        return f"{self.kind}: {self.message}"


class DiagnosticSink:
    """
    Collects diagnostics for one compile/generate call and logs each one.

    Args:
        log: Logger used for the warnings (default: this module's logger).
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self.diagnostics: List[Diagnostic] = []

    def report(self, error: MorphGenError, source: str = "") -> Diagnostic:
        """Record a non-fatal error and log it at WARNING level."""
        diagnostic = Diagnostic(type(error).__name__, source, str(error))
        self.diagnostics.append(diagnostic)
        self.log.warning(str(diagnostic))
        return diagnostic

    def kinds(self) -> List[str]:
        return [d.kind for d in self.diagnostics]
