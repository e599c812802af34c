"""
Structured logging configuration

Console output is colored text in development and JSON when JSON_LOGS is
set; the optional log file is always JSON lines. Every record carries the
request and job IDs bound to the current task, and extra fields whose key
looks like a credential are masked before they are written.
"""

import json
import logging
import os
import sys
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

REDACTED = "***REDACTED***"
SENSITIVE_KEY_TOKENS = ("password", "secret", "token", "api_key", "apikey", "authorization", "cookies")
QUIET_LOGGERS = ("urllib3", "httpx", "httpcore", "asyncio", "multipart")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
job_id_var: ContextVar[Optional[str]] = ContextVar("job_id", default=None)

# Attributes every LogRecord has; anything else arrived through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "taskName"}
_CORRELATION_KEYS = ("request_id", "job_id")


def _correlation() -> Dict[str, str]:
    ids = {"request_id": request_id_var.get(), "job_id": job_id_var.get()}
    return {key: value for key, value in ids.items() if value}


def redact(value: Any, key: str = "") -> Any:
    """Mask values stored under credential-looking keys, recursing into containers"""
    sensitive = bool(key) and any(token in key.lower() for token in SENSITIVE_KEY_TOKENS)
    if sensitive and not isinstance(value, (dict, list, tuple)):
        return REDACTED
    if isinstance(value, dict):
        return {k: redact(v, str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS
        and key not in _CORRELATION_KEYS
        and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        payload.update(_correlation())

        extras = _record_extras(record)
        if extras:
            payload["extra"] = redact(extras)

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Compact colored lines for a terminal"""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, "")
        clock = time.strftime("%H:%M:%S", time.localtime(record.created))
        tags = " ".join(
            f"{key.split('_')[0][:3]}:{value[:8]}" for key, value in _correlation().items()
        )

        line = f"{color}{clock}.{int(record.msecs):03d} {record.levelname:<8}{self.RESET} {record.name}"
        if tags:
            line += f" [{tags}]"
        line += f" | {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Adapter whose bound fields are merged with, not replaced by, call-site extras"""

    def process(self, msg: str, kwargs: Any) -> tuple:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {}), **_correlation()}
        return msg, kwargs


def _handler(handler: logging.Handler, formatter: logging.Formatter, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
) -> None:
    """
    Replace the root handlers with the service's console (and file) handlers

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: JSON-lines file, rotated at LOG_MAX_BYTES
        use_json: JSON console output instead of colored text
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers = [
        _handler(
            logging.StreamHandler(sys.stdout),
            StructuredFormatter() if use_json else DevelopmentFormatter(),
            numeric_level,
        )
    ]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            log_file,
            maxBytes=int(os.getenv("LOG_MAX_BYTES", str(20 * 1024 * 1024))),
            backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            encoding="utf-8",
        )
        handlers.append(_handler(rotating, StructuredFormatter(), numeric_level))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Logger with fields bound to every record it emits

    Example:
        logger = get_logger(__name__, component="gateway")
        logger.info("Running tool", extra={"tool": "ffmpeg"})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def set_job_id(job_id: str) -> None:
    job_id_var.set(job_id)


def clear_context() -> None:
    request_id_var.set(None)
    job_id_var.set(None)


class LogTimer:
    """Logs ``Starting:``, then ``Completed:`` or ``Failed:`` with the elapsed seconds"""

    def __init__(self, logger: logging.LoggerAdapter, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.duration: Optional[float] = None
        self._started = 0.0

    def __enter__(self) -> "LogTimer":
        self.logger.log(self.level, f"Starting: {self.operation}")
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        self.duration = round(time.perf_counter() - self._started, 6)
        if exc_type is None:
            self.logger.log(self.level, f"Completed: {self.operation}", extra={"duration_seconds": self.duration})
        else:
            self.logger.error(
                f"Failed: {self.operation}",
                extra={"duration_seconds": self.duration, "error": str(exc_val)},
            )
