"""
Hook event log.

Appends one JSON line per hook invocation to
~/.gewe-cc/logs/YYYY-MM-DD-hooks.jsonl, for auditing what the host sent and
what was decided. Process metrics are included to debug runaway hook loops.

Logging must never change a decision: every failure here is reported on
stderr and dropped.
"""

from __future__ import annotations

import json
import os
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

import psutil

from gewe_cc.hooks.schemas import HookDecision, HookLogEntry
from gewe_cc.lib.paths import get_logs_dir


def _json_serializer(obj: Any) -> str:
    """Convert non-serializable objects to strings for JSON serialization."""
    return str(obj)


def get_hook_log_path(logs_dir: Path | None = None, date: str | None = None) -> Path:
    """Per-day log file path; creates the directory."""
    logs_dir = logs_dir or get_logs_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)
    if date is None:
        date = datetime.now().strftime("%Y-%m-%d")
    return logs_dir / f"{date}-hooks.jsonl"


def log_hook_event(
    hook_event: str,
    input_data: dict[str, Any],
    output: HookDecision | None = None,
    error: str | None = None,
    exit_code: int = 0,
    logs_dir: Path | None = None,
) -> None:
    """Append one hook invocation to the event log."""
    try:
        log_path = get_hook_log_path(logs_dir)

        process = psutil.Process(os.getpid())
        mem_info = process.memory_info()

        entry = HookLogEntry(
            hook_event=hook_event,
            logged_at=datetime.now().astimezone().replace(microsecond=0).isoformat(),
            session_id=str(input_data.get("session_id") or ""),
            exit_code=exit_code,
            input=input_data,
            output=output.model_dump(exclude_none=True) if output else None,
            error=error,
        )

        log_dict = entry.model_dump()
        log_dict["debug"] = {
            "pid": os.getpid(),
            "ppid": os.getppid(),
            "mem_rss_mb": mem_info.rss / (1024 * 1024),
            "mem_vms_mb": mem_info.vms / (1024 * 1024),
            "process_uptime": time.time() - process.create_time(),
        }

        with log_path.open("a", encoding="utf-8") as f:
            json.dump(
                log_dict,
                f,
                separators=(",", ":"),
                ensure_ascii=False,
                default=_json_serializer,
            )
            f.write("\n")

    except Exception as e:
        print(f"[event_log] Error logging hook event: {e}", file=sys.stderr)
