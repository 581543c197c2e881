"""JSON logging with stable schema, plus the plain-text operator lines."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from municipalities.common.constants import JSON_LOG_FIELDS
from municipalities.common.fs import ensure_dir
from municipalities.common.time_utils import utc_timestamp_iso


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "run_id": getattr(record, "run_id", None),
            "stage": getattr(record, "stage", None),
            "event": getattr(record, "event", None),
            "status": getattr(record, "status", None),
            "duration_ms": getattr(record, "duration_ms", None),
            "rows_in": getattr(record, "rows_in", None),
            "rows_out": getattr(record, "rows_out", None),
            "error_code": getattr(record, "error_code", None),
            "message": record.getMessage(),
        }
        for field in JSON_LOG_FIELDS:
            payload.setdefault(field, None)
        return json.dumps(payload, ensure_ascii=False)


def build_logger(run_id: str, data_dir: Path, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(f"municipalities.{run_id}")
    logger.setLevel(level.upper())
    logger.handlers.clear()

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    log_path = data_dir / "run_meta" / f"{run_id}.log.jsonl"
    ensure_dir(log_path.parent)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(JsonLineFormatter())
    logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.info(message, extra=event_fields)


def log_warning(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.warning(message, extra=event_fields)


def log_failure(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.error(message, extra=event_fields)


def close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def report_progress(step: int, total: int, message: str, stream: TextIO | None = None) -> None:
    print(f"[{step}/{total}] {message}", file=stream or sys.stdout, flush=True)


def report_error(message: str, exc: BaseException, stream: TextIO | None = None) -> None:
    print(f"{message}: {exc}", file=stream or sys.stderr, flush=True)
