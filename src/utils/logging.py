"""JSON log lines for the webcomic API.

Every line carries the service name so the edge logs can be filtered
alongside the site's other workers. Services log their identifiers as
camelCase extras (comicId, issueNumber, prNumber) and those pass through
unchanged. Sanity and GitHub failures embed the upstream response body in
the `error` extra; that can be a whole HTML gateway page, so long string
extras are cut to MAX_EXTRA_LENGTH characters.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any

MAX_EXTRA_LENGTH = 1000

_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname',
    'process', 'processName', 'relativeCreated', 'thread', 'threadName',
    'exc_info', 'exc_text', 'stack_info', 'taskName'
}


def _clip(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_EXTRA_LENGTH:
        return f"{value[:MAX_EXTRA_LENGTH]}... [{len(value) - MAX_EXTRA_LENGTH} more chars]"
    return value


class JSONFormatter(logging.Formatter):
    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            log_data["service"] = self.service

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not callable(value):
                log_data[key] = _clip(value)

        return json.dumps(log_data, default=str)


def setup_structured_logging(level: str = "INFO", service: str | None = None):
    """Route the root logger and uvicorn's access log through JSONFormatter.

    httpx logs one INFO line per Sanity or GitHub call; the adapters log
    failures themselves, so httpx and httpcore are held at WARNING.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(service))
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = [handler]
    uvicorn_access.setLevel(logging.WARNING)

    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
