"""
Session gate: should this hook event be held for remote control?

`decide()` is the single source of truth for Stop events. Rules, first match
wins:

1. Stop with stop_hook_active -> PROCEED. The host re-runs Stop hooks after
   a block and sets this flag on the replay. Approving here is what keeps
   Stop -> block -> Stop from cycling forever.
2. Remote mode disabled (see `remote_enabled`) -> PROCEED.
3. Session id present in the disabled-session set -> PROCEED.
4. Otherwise -> INTERCEPT.

PromptSubmit and Notification are not part of the stop loop and only need
`remote_enabled()`.

No function here writes state.
"""

from __future__ import annotations

import logging

from gewe_cc.lib.gate_types import EventKind, GateVerdict
from gewe_cc.lib.remote_state import RemoteStateStore

logger = logging.getLogger(__name__)


def remote_enabled(store: RemoteStateStore) -> bool:
    """Global enabled bit. Any store failure reads as disabled (fail open)."""
    try:
        return bool(store.is_remote_enabled())
    except Exception as e:
        logger.warning(f"Remote state unreadable, treating as disabled: {e}")
        return False


def _session_disabled(store: RemoteStateStore, session_id: str) -> bool:
    if not session_id:
        return False
    try:
        return bool(store.is_session_disabled(session_id))
    except Exception as e:
        logger.warning(f"Disabled-session set unreadable for {session_id}: {e}")
        return False


def decide(
    event_kind: EventKind,
    session_id: str,
    stop_hook_active: bool,
    store: RemoteStateStore,
) -> GateVerdict:
    """Combine loop guard, global flag and session opt-out into a verdict."""
    if event_kind == EventKind.STOP and stop_hook_active:
        return GateVerdict.PROCEED

    if not remote_enabled(store):
        return GateVerdict.PROCEED

    if _session_disabled(store, session_id):
        logger.debug(f"Session {session_id} opted out of remote mode")
        return GateVerdict.PROCEED

    return GateVerdict.INTERCEPT
