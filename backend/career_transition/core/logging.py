import json
import logging
import sys
from datetime import datetime, timezone

from career_transition.core.config import settings

EXTRA_FIELDS = (
    "request_id",
    "user_id",
    "session_id",
    "plan_id",
    "agent_id",
    "task_id",
    "milestone_id",
    "method",
    "path",
    "status",
    "duration_ms",
)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log drains."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.levelno >= logging.WARNING:
            entry["source"] = f"{record.filename}:{record.lineno}"
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }
        return json.dumps(entry, default=str)


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    root = logging.getLogger("career_transition")
    if getattr(root, "_configured", False):
        return

    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    handler = logging.StreamHandler(sys.stdout)
    if (fmt or settings.log_format).lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s", datefmt="%H:%M:%S")
        )
    root.addHandler(handler)
    root.propagate = False
    root._configured = True  # type: ignore[attr-defined]
