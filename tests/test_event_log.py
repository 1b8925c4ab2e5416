"""Tests for the JSONL hook event log."""

import json
from pathlib import Path

from gewe_cc.hooks.event_log import get_hook_log_path, log_hook_event
from gewe_cc.hooks.schemas import HookDecision


def test_log_path_is_per_day(tmp_path: Path) -> None:
    path = get_hook_log_path(tmp_path / "logs", date="2026-01-02")
    assert path == tmp_path / "logs" / "2026-01-02-hooks.jsonl"
    assert path.parent.is_dir()


def test_appends_one_line_per_event(tmp_path: Path) -> None:
    logs_dir = tmp_path / "logs"
    log_hook_event("stop", {"session_id": "s1"}, HookDecision.approve(), logs_dir=logs_dir)
    log_hook_event("notification", {"session_id": "s2"}, HookDecision.approve(), logs_dir=logs_dir)

    lines = next(logs_dir.glob("*-hooks.jsonl")).read_text().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["hook_event"] == "stop"
    assert first["output"] == {"decision": "approve"}
    assert first["debug"]["pid"] > 0


def test_logging_failure_goes_to_stderr(tmp_path: Path, capsys) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file")
    log_hook_event("stop", {}, logs_dir=blocker / "logs")
    assert "[event_log] Error logging hook event" in capsys.readouterr().err
