"""
Log formatters that surface the client's request context.

``NexusClient`` attaches ``method``, ``url``, ``status_code``,
``repository_id`` and ``group_id`` to its records through ``extra=``.
"""

import json
import logging
from datetime import datetime
from typing import Dict, Any

# Request context fields set by the client, in display order
REQUEST_FIELDS = ("method", "url", "status_code", "repository_id", "group_id")

# Attributes every LogRecord carries; anything else arrived through ``extra=``
STANDARD_FIELDS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage',
    'exc_info', 'exc_text', 'stack_info', 'message', 'taskName', 'asctime'
}


def request_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the request fields present on a record, skipping unset ones."""
    return {
        key: getattr(record, key)
        for key in REQUEST_FIELDS
        if getattr(record, key, None) is not None
    }


class StructuredFormatter(logging.Formatter):
    """
    JSON lines formatter.

    Request fields go under ``request``; any other ``extra=`` values go
    under ``extra`` when ``include_extra`` is set.
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage()
        }

        context = request_context(record)
        if context:
            log_entry["request"] = context

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra_fields = {
                key: value for key, value in record.__dict__.items()
                if key not in STANDARD_FIELDS and key not in REQUEST_FIELDS and not key.startswith('_')
            }
            if extra_fields:
                log_entry["extra"] = extra_fields

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ContextFormatter(logging.Formatter):
    """
    Plain-text formatter that appends the request context.

    ``Deleted repository: snap-1 [method=DELETE repository_id=snap-1]``
    """

    def formatMessage(self, record: logging.LogRecord) -> str:
        formatted = super().formatMessage(record)

        context = request_context(record)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            formatted = f"{formatted} [{pairs}]"

        return formatted
