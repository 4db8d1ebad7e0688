"""Structured logging for the gateway.

Every log line is a JSON object carrying the correlation fields of the
request being served (request_id and, once resolved, tenant_id). Fields
passed through ``extra`` whose names mark them as secrets or document bodies
are replaced with a placeholder before formatting, so neither credentials
nor tenant content ever reach the log sink.

Call :func:`configure_logging` once at startup; it replaces the root
handlers.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging import LogRecord
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterable, Mapping

from app.core.config import LogSettings, settings

REDACTED = "[REDACTED]"

# Request-scoped fields copied onto every record emitted while serving
CORRELATION_FIELDS: tuple[str, ...] = ("request_id", "tenant_id")

_correlation: dict[str, ContextVar[str | None]] = {
    name: ContextVar(name, default=None) for name in CORRELATION_FIELDS
}

# Field names whose values are never logged
SENSITIVE_KEYS_DEFAULT: frozenset[str] = frozenset(
    {
        # credentials
        "api_key",
        "x-api-key",
        "authorization",
        "token",
        "secret",
        "password",
        "cookie",
        "set-cookie",
        # tenant data
        "content",
        "document",
        "payload",
    }
)

# Standard LogRecord attributes; everything else on a record came from extra
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def set_request_id(request_id: str | None) -> None:
    _correlation["request_id"].set(request_id)


def get_request_id() -> str | None:
    """Correlation id of the request currently being served, if any."""

    return _correlation["request_id"].get()


def set_tenant_id(tenant_id: str | None) -> None:
    _correlation["tenant_id"].set(tenant_id)


def get_tenant_id() -> str | None:
    return _correlation["tenant_id"].get()


def current_correlation() -> dict[str, str]:
    """Correlation fields bound in the current context, unset ones omitted."""

    return {
        name: value
        for name, var in _correlation.items()
        if (value := var.get()) is not None
    }


def clear_correlation() -> None:
    """Unbind every correlation field; called when a request finishes."""

    for var in _correlation.values():
        var.set(None)


def redact(value: Any, sensitive_keys: frozenset[str] | set[str]) -> Any:
    """Replace sensitive entries at any depth of mappings and sequences.

    Args:
        value: Value taken from a record's extra fields.
        sensitive_keys: Lower-cased field names to hide.

    Returns:
        A copy of value with sensitive entries replaced by ``[REDACTED]``.
    """

    if isinstance(value, Mapping):
        return {
            key: REDACTED if str(key).lower() in sensitive_keys else redact(item, sensitive_keys)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(redact(item, sensitive_keys) for item in value)
    return value


def _extra_fields(record: LogRecord, sensitive_keys: frozenset[str] | set[str]) -> dict[str, Any]:
    """Collect the extra fields of a record, redacted."""

    fields: dict[str, Any] = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        if key.lower() in sensitive_keys:
            fields[key] = REDACTED
        else:
            fields[key] = redact(value, sensitive_keys)
    return fields


class CorrelationFilter(logging.Filter):
    """Copy bound correlation fields onto records that do not set them."""

    def filter(self, record: LogRecord) -> bool:  # noqa: D401
        for name, value in current_correlation().items():
            if getattr(record, name, None) is None:
                setattr(record, name, value)
        return True


class SensitiveDataFilter(logging.Filter):
    """Redact sensitive extra fields in place, for any formatter."""

    def __init__(self, sensitive_keys: Iterable[str] | None = None) -> None:
        super().__init__()
        self.sensitive_keys = frozenset(
            key.lower() for key in (sensitive_keys or SENSITIVE_KEYS_DEFAULT)
        )

    def filter(self, record: LogRecord) -> bool:  # noqa: D401
        for key, value in _extra_fields(record, self.sensitive_keys).items():
            setattr(record, key, value)
        return True


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def __init__(
        self,
        *,
        sensitive_keys: Iterable[str] | None = None,
        ensure_ascii: bool = True,
    ) -> None:
        super().__init__()
        self.sensitive_keys = frozenset(
            key.lower() for key in (sensitive_keys or SENSITIVE_KEYS_DEFAULT)
        )
        self.ensure_ascii = ensure_ascii

    def format(self, record: LogRecord) -> str:  # noqa: D401
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(current_correlation())
        line.update(_extra_fields(record, self.sensitive_keys))

        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(line, default=str, ensure_ascii=self.ensure_ascii)


def _build_handler(log_settings: LogSettings) -> logging.Handler:
    """Stdout handler, or a (rotating) file handler when LOG_OUTPUT=file."""

    if log_settings.output.lower() != "file":
        return logging.StreamHandler(sys.stdout)

    file_path = Path(log_settings.file_path or "logs/gateway.log")
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if log_settings.max_bytes:
        return RotatingFileHandler(
            file_path,
            maxBytes=log_settings.max_bytes,
            backupCount=log_settings.backup_count,
            encoding="utf-8",
        )
    return logging.FileHandler(file_path, encoding="utf-8")


def configure_logging(log_settings: LogSettings | None = None) -> None:
    """Install the gateway's handler on the root logger.

    Args:
        log_settings: Logging settings; defaults to the global settings.
    """

    cfg = log_settings or settings.log

    handler = _build_handler(cfg)
    handler.addFilter(CorrelationFilter())
    handler.addFilter(SensitiveDataFilter())

    if cfg.format.lower() == "plain":
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    else:
        handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))

    # uvicorn installs its own handlers
    logging.getLogger("uvicorn").propagate = False
    logging.getLogger("uvicorn.access").propagate = False
    # Client libraries log every request at INFO
    logging.getLogger("elastic_transport").setLevel(logging.WARNING)
