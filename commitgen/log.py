"""structlog-based logging setup.

- Console output for interactive use, JSON output on request
- API keys and bearer tokens are masked in string values
- Logs go to stderr so command output on stdout stays clean
"""

import logging
import re
import sys
from typing import Optional

import structlog

SENSITIVE_PATTERNS = [
    (re.compile(r"(api[_-]?key=)[^&\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(Bearer\s+)[^\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"\b(sk-[A-Za-z0-9_-]{4})[A-Za-z0-9_-]+"), r"\1***"),
    (re.compile(r"\b(AIza[A-Za-z0-9_-]{4})[A-Za-z0-9_-]+"), r"\1***"),
]

NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "urllib3",
    "anthropic",
    "openai",
    "google_genai",
]


def _mask_sensitive_data(value: str) -> str:
    """Mask credentials in a string."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def mask_sensitive_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """Mask credentials in every string value of the event."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _mask_sensitive_data(value)
    return event_dict


def resolve_level(verbose: bool = False, quiet: bool = False) -> str:
    """Map CLI verbosity flags to a level name. Verbose wins over quiet."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return "INFO"


def setup_logging(level: Optional[str] = None, json_logs: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ...). Defaults to INFO.
        json_logs: Render events as JSON instead of console lines.
    """
    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    shared_processors: list = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_sensitive_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger for ``name``."""
    return structlog.get_logger(name)
