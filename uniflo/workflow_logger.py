# uniflo/workflow_logger.py
# One line per syllabus workflow event:
#   <utc ts> | request_id=document-12 | status=stored | actor=system | SyllabusStored | json={...}
from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

_LOG_DIR: Path | None = None
_RUN_LOG: Path | None = None


def configure_log_dir(log_dir: str | Path) -> None:
    """Send later events to log_dir; the next event opens a fresh run file there."""
    global _LOG_DIR, _RUN_LOG
    _LOG_DIR = Path(log_dir)
    _RUN_LOG = None


def _run_log_path() -> Path:
    # first event of a run creates <log dir>/run_YYYYMMDDTHHMMSSZ.log
    global _RUN_LOG
    if _RUN_LOG is None:
        folder = _LOG_DIR or Path(os.getenv("WORKFLOW_LOG_DIR", "logs"))
        folder.mkdir(parents=True, exist_ok=True)
        started = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        _RUN_LOG = folder / f"run_{started}.log"
    return _RUN_LOG


def format_event(request_id: str, status: str, actor: str, event: str, extra: dict[str, Any]) -> str:
    stamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
    payload = json.dumps(extra, ensure_ascii=False, default=str)
    return f"{stamp} | request_id={request_id} | status={status} | actor={actor} | {event} | json={payload}"


def log_event(*, request_id: str, status: str, actor: str, event: str, extra: dict | None = None) -> None:
    line = format_event(request_id, status, actor, event, extra or {})
    print(line, flush=True)
    with _run_log_path().open("a", encoding="utf-8") as f:
        f.write(line + "\n")
