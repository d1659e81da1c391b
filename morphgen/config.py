"""
Runtime configuration for morphgen.

Defaults live on MorphGenConfig; MORPHGEN_* environment variables override
them, and command-line flags override both.
"""
import os
import logging
from dataclasses import dataclass, replace
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_MATCH_STEPS = 100_000

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class MorphGenConfig:
    """
    Settings shared by the loader, the matcher and the CLI.

    Attributes:
        max_match_steps: Node visits allowed for a single rule match attempt.
        log_file: Optional path of a log file written in addition to stdout.
        debug: Enables DEBUG logging with per-rule context.
    """

    max_match_steps: int = DEFAULT_MAX_MATCH_STEPS
    log_file: Optional[str] = None
    debug: bool = False

    @classmethod
    def from_env(cls, environ=None) -> "MorphGenConfig":
        """Build a config from MORPHGEN_* environment variables."""
        environ = os.environ if environ is None else environ
        config = cls()

        steps = environ.get('MORPHGEN_MAX_MATCH_STEPS')
        if steps:
            try:
                config = replace(config, max_match_steps=int(steps))
            except ValueError:
                logger.warning(f"Ignoring non-integer MORPHGEN_MAX_MATCH_STEPS={steps!r}")

        log_file = environ.get('MORPHGEN_LOG_FILE')
        if log_file:
            config = replace(config, log_file=log_file)

        if environ.get('MORPHGEN_DEBUG', '').strip().lower() in _TRUE_VALUES:
            config = replace(config, debug=True)

        return config
