"""Structured Logging — decision records for applications, members and projects.

Every service log line about a matching decision names the pair it concerns
(user_id, project_id) and, for owner actions, the actor_id. Refusals carry the
full reason list so a rejected apply can be explained from the log alone.

Invariants:
    - JSON lines always carry timestamp, level, logger and message
    - Decision fields (EXTRA_FIELDS) appear only when the caller passed them via extra=
    - Text format appends the same decision fields as key=value pairs
    - setup_logging is idempotent: calling it twice does not duplicate handlers

Design Decisions:
    - Formatters on stdlib logging, installed once from the app lifespan
    - LOG_FORMAT=text for local runs and tests, json everywhere else
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "user_id", "project_id", "actor_id", "error_code",
    "status", "path", "reasons", "positions",
)

_HANDLER_NAME = "teammatch"


def decision_fields(record: logging.LogRecord) -> dict:
    """Decision fields present on record, in EXTRA_FIELDS order."""
    fields = {}
    for key in EXTRA_FIELDS:
        val = record.__dict__.get(key)
        if val is not None:
            fields[key] = val
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line; decision fields inlined at top level."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(decision_fields(record))
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class DecisionTextFormatter(logging.Formatter):
    """Human-readable line followed by key=value decision fields."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = decision_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in fields.items())
        return f"{line} [{pairs}]"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install the teammatch handler on the root logger, replacing an earlier one."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else DecisionTextFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
