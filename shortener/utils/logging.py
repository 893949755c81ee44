"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` at process startup (see `shortener.__main__`)
before any other logging is done.

Every log line is a single JSON object. Fields passed through `extra=` are
merged next to the base fields:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "shortener.web.app",
    "message": "Handled request.",
    "method": "GET",
    "path": "/abc123",
    "status": 307
}
"""

import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any

from shortener.utils.config import log_level


# Attributes of a bare LogRecord plus the ones Formatter.format() adds.
# Anything else on a record came from `extra=`.
RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """Render a LogRecord and its `extra` fields as one JSON line"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created, tz=UTC)
        return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        fields.update((key, value) for key, value in vars(record).items() if key not in RECORD_ATTRS)

        if record.exc_info:
            fields['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            fields['stack'] = self.formatStack(record.stack_info)

        return json.dumps(fields, default=str)


def logging_config(level: str) -> dict[str, Any]:
    """Build the dictConfig schema: JSON lines on stdout at `level`"""
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {'json': {'()': JsonFormatter}},
        'handlers': {
            'stdout': {
                'class': 'logging.StreamHandler',
                'formatter': 'json',
                'stream': 'ext://sys.stdout',
            },
        },
        # Requests are logged by shortener.web
        'loggers': {'werkzeug': {'level': 'WARNING'}},
        'root': {'level': level, 'handlers': ['stdout']},
    }


def initialize_logging() -> None:
    logging.config.dictConfig(logging_config(log_level()))
