"""Logging setup for the Homely API.

Records pass through two filters before any handler formats them:

- ``RequestIdFilter`` stamps the id of the HTTP request being served, taken
  from a ContextVar that ``RequestIDMiddleware`` sets.
- ``SecretRedactionFilter`` rewrites the rendered message so Supabase access
  and refresh tokens, bearer headers and password fields never reach a log
  sink.

The console speaks plain text or JSON (``log_format``); the rotating file is
always plain text.
"""

import logging
import re
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

from homely.core.config import Settings, get_settings

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)

REDACTED = "[REDACTED]"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"
JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(request_id)s %(message)s"

_SECRET_PATTERNS = (
    # Supabase JWTs: header.payload.signature, header always starts with eyJ
    re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+"),
    re.compile(r"(?i)bearer\s+\S+"),
    re.compile(
        r"(?i)\b(password|refresh_token|access_token|service_role_key|apikey|secret)"
        r"(['\"]?\s*[=:]\s*['\"]?)[^\s,'\"}&]+"
    ),
)

_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore")


def get_request_id() -> str | None:
    return _request_id.get()


def set_request_id(request_id: str | None) -> None:
    _request_id.set(request_id)


def redact_secrets(text: str) -> str:
    """Replace tokens and credential values in ``text`` with a marker."""
    for pattern in _SECRET_PATTERNS:
        if pattern.groups:
            text = pattern.sub(rf"\1\2{REDACTED}", text)
        else:
            text = pattern.sub(REDACTED, text)
    return text


def sanitize_error(error: Exception, max_length: int = 300) -> str:
    """Render an exception for a log line: type, redacted message, bounded length."""
    message = redact_secrets(str(error))
    if len(message) > max_length:
        message = f"{message[:max_length]}...[truncated]"
    return f"{type(error).__name__}: {message}" if message else type(error).__name__


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class SecretRedactionFilter(logging.Filter):
    """Redact secrets from the fully rendered message of each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        rendered = record.getMessage()
        redacted = redact_secrets(rendered)
        if redacted != rendered:
            record.msg = redacted
            record.args = None
        return True


def build_console_formatter(settings: Settings) -> logging.Formatter:
    if settings.log_format == "json":
        return JsonFormatter(
            JSON_FIELDS,
            rename_fields={"levelname": "level", "name": "logger", "asctime": "time"},
            static_fields={"service": settings.app_name, "environment": settings.environment_name},
        )
    return logging.Formatter(TEXT_FORMAT)


def _rotating_file_handler(settings: Settings) -> logging.Handler | None:
    path = Path(settings.log_file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=settings.log_file_max_bytes,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"File logging disabled, cannot open {path}: {e}\n")
        return None


def setup_logging(settings: Settings | None = None) -> None:
    """Install the console and file handlers on the root logger.

    Safe to call more than once; previously installed handlers are replaced.
    """
    settings = settings or get_settings()
    level = logging.getLevelNamesMapping().get(settings.log_level, logging.INFO)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(build_console_formatter(settings))
    handlers: list[logging.Handler] = [console]

    file_handler = _rotating_file_handler(settings)
    if file_handler is not None:
        file_handler.setFormatter(logging.Formatter(TEXT_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.addFilter(RequestIdFilter())
        handler.addFilter(SecretRedactionFilter())
        root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    root.info(f"Logging at {settings.log_level} ({settings.log_format} console)")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
