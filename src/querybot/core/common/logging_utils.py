"""
Logging utilities for the application.

This module provides utilities for logging, including:
- Redaction of the chat OAuth token
- Test/production environment tagging
- Structured loggers for dispatch events
"""

import contextlib
import logging
import os
import re
import sys
from typing import Any, Literal

import structlog


def _is_running_under_pytest() -> bool:
    """Detect if we're running under pytest."""
    return "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST") is not None


def _get_environment_tag() -> str:
    """Get the environment tag for logging.

    Returns:
        'test' if running under pytest, 'prod' otherwise
    """
    return "test" if _is_running_under_pytest() else "prod"


class EnvironmentTaggingFilter(logging.Filter):
    """Logging filter that adds environment tags to log records."""

    def __init__(self) -> None:
        super().__init__()
        self._env_tag = _get_environment_tag()

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.env_tag = self._env_tag
        return True


class EnvironmentTaggingFormatter(logging.Formatter):
    """Logging formatter that includes environment tags."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Literal["%", "{", "$"] = "%",
    ) -> None:
        if fmt is None:
            fmt = "%(asctime)s [%(levelname)-8s] [%(env_tag)s] %(name)s:%(lineno)d %(message)s"
        super().__init__(fmt, datefmt, style=style)


DEFAULT_REDACTED_FIELDS = {
    "auth_token",
    "oauth",
    "password",
    "secret",
}

# Twitch chat tokens, with or without the "oauth:" scheme prefix
OAUTH_TOKEN_PATTERN = re.compile(r"oauth:[a-zA-Z0-9]{10,}")


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger.

    Args:
        name: Optional logger name

    Returns:
        A structured logger
    """
    return structlog.get_logger(name)  # type: ignore


def redact(value: str, mask: str = "***") -> str:
    """Redact a sensitive value, keeping the first and last two characters."""
    if not value:
        return value

    if len(value) > 6:
        return f"{value[0:2]}{mask}{value[-2:]}"
    else:
        return mask


def redact_dict(
    data: dict[str, Any], redacted_fields: set[str] | None = None, mask: str = "***"
) -> dict[str, Any]:
    """Redact sensitive fields in a dictionary.

    Args:
        data: The dictionary to redact
        redacted_fields: The fields to redact
        mask: The mask to use

    Returns:
        The redacted dictionary
    """
    if redacted_fields is None:
        redacted_fields = DEFAULT_REDACTED_FIELDS

    result: dict[str, Any] = {}

    for key, value in data.items():
        if key.lower() in redacted_fields:
            if isinstance(value, str):
                result[key] = redact(value, mask)
            else:
                result[key] = mask
        elif isinstance(value, dict):
            result[key] = redact_dict(value, redacted_fields, mask)
        else:
            result[key] = value

    return result


class TokenRedactionFilter(logging.Filter):
    """Logging filter that redacts known secrets from log records.

    Sanitizes `record.msg` and `record.args` (strings or containers of
    strings), replacing any secret occurrence with a mask.
    """

    def __init__(self, secrets: list[str] | set[str] | None = None, mask: str = "***") -> None:
        super().__init__()
        self.mask = mask
        keys = {k for k in (secrets or []) if k}
        self.patterns: list[re.Pattern] = []
        if keys:
            escaped = sorted((re.escape(k) for k in keys), key=len, reverse=True)
            self.patterns.append(re.compile("|".join(escaped)))
        self.patterns.append(OAUTH_TOKEN_PATTERN)

    def _sanitize(self, obj: object) -> object:
        if isinstance(obj, str):
            s = obj
            for pat in self.patterns:
                s = pat.sub(self.mask, s)
            return s
        if isinstance(obj, dict):
            return {k: self._sanitize(v) for k, v in obj.items()}
        if isinstance(obj, list | tuple):
            return type(obj)(self._sanitize(v) for v in obj)
        return obj

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if isinstance(record.msg, str):
            record.msg = self._sanitize(record.msg)  # type: ignore[assignment]
        if record.args:
            if isinstance(record.args, dict):
                record.args = self._sanitize(record.args)  # type: ignore[assignment]
            elif isinstance(record.args, tuple):
                record.args = tuple(self._sanitize(a) for a in record.args)
        return True


def install_environment_tagging() -> None:
    """Install environment tagging filter on the root logger and its handlers."""
    root = logging.getLogger()
    filter_instance = EnvironmentTaggingFilter()
    root.addFilter(filter_instance)

    for handler in list(root.handlers):
        handler.addFilter(filter_instance)
        if isinstance(handler.formatter, logging.Formatter) and not isinstance(
            handler.formatter, EnvironmentTaggingFormatter
        ):
            handler.setFormatter(
                EnvironmentTaggingFormatter(
                    fmt=handler.formatter._fmt, datefmt=handler.formatter.datefmt
                )
            )


def configure_logging_with_environment_tagging(
    level: int = logging.INFO,
    log_format: str | None = None,
    log_file: str | None = None,
) -> None:
    """Configure logging with environment tagging.

    Args:
        level: Logging level
        log_format: Optional log format string
        log_file: Optional log file path, appended to
    """
    if log_format is None:
        log_format = "%(asctime)s [%(levelname)-8s] [%(env_tag)s] %(name)s:%(lineno)d %(message)s"

    formatter = EnvironmentTaggingFormatter(fmt=log_format)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # Route structlog events through the stdlib handlers configured above
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    install_environment_tagging()


def install_token_redaction_filter(
    secrets: list[str] | set[str] | None, mask: str = "***"
) -> None:
    """Install the token redaction filter on the root logger and its handlers.

    Safe to call multiple times.
    """
    root = logging.getLogger()
    filter_instance = TokenRedactionFilter(secrets or [], mask=mask)
    root.addFilter(filter_instance)
    for handler in list(root.handlers):
        with contextlib.suppress(AttributeError):
            handler.addFilter(filter_instance)
