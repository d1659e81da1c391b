import logging
import sys
from datetime import datetime
from typing import Optional


def setup_logging(log_file: Optional[str] = None, level=logging.INFO, debug=False):
    """
    Set up logging for command-line use of morphgen.

    The library itself only creates module loggers; call this from an entry
    point to get output.

    Args:
        log_file: Optional path to a log file, appended to.
        level: Logging level (default: INFO). Use DEBUG for verbose output.
        debug: If True, enables DEBUG level with file/line context, which
            also turns on per-rule match tracing.
    """
    # Clear existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if debug:
        level = logging.DEBUG
        format_string = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
    else:
        format_string = '%(asctime)s - %(levelname)s - %(message)s'

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(format_string))
        root_logger.addHandler(handler)

    if log_file:
        # Run separator, so appended runs can be told apart
        logging.info("=" * 80)
        logging.info(f"NEW RUN STARTED - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        if debug:
            logging.info("DEBUG MODE ENABLED - Verbose logging active")
        logging.info("=" * 80)


def log_with_context(message, context=None, level=logging.DEBUG, logger=None):
    """
    Log a message with additional context (bindings, state, etc.).

    Args:
        message: Main log message
        context: Dict of contextual information
        level: Log level (default: DEBUG)
        logger: Logger to use (default: the 'morphgen' logger)
    """
    logger = logger or logging.getLogger('morphgen')
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message)

    if context and logger.isEnabledFor(logging.DEBUG):
        for key, value in context.items():
            # Truncate long values
            str_value = str(value)
            if len(str_value) > 200:
                str_value = str_value[:200] + "..."
            logger.debug(f"  └─ {key}: {str_value}")
