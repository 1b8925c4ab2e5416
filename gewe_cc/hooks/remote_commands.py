"""
Remote-mode control commands typed into the agent prompt.

A prompt that is exactly one of these literals never reaches the agent:

    >remote-on      enable remote mode globally
    >remote-off     opt the current session out (global flag untouched)
    >remote-status  show whether remote mode is on

Each responder returns a block decision. The block reason is how the result
gets echoed back to the human, since the hook's stdout belongs to the host.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from gewe_cc.hooks.schemas import HookDecision, HookInput
from gewe_cc.lib.paths import display_path
from gewe_cc.lib.remote_state import RemoteStateStore
from gewe_cc.lib.session_gate import remote_enabled

logger = logging.getLogger(__name__)

REMOTE_ON = ">remote-on"
REMOTE_OFF = ">remote-off"
REMOTE_STATUS = ">remote-status"


def _lock_hint(store: RemoteStateStore) -> str:
    return display_path(store.lock_file)


def handle_remote_on(store: RemoteStateStore, hook_input: HookInput) -> HookDecision:
    """Enable remote mode (config flag + lock) and confirm with the target."""
    store.enable_remote()
    config = store.load()

    reason = (
        "✅ Remote mode enabled\n\n"
        "Configuration:\n"
        f"- Target WeChat: {config.notification.wxid}\n"
        f"- Listen address: {config.notification.listen}\n"
        f"- Lock file: {_lock_hint(store)}\n\n"
        "When a task finishes, the session will wait for instructions from WeChat."
    )
    return HookDecision.block(reason)


def handle_remote_off(store: RemoteStateStore, hook_input: HookInput) -> HookDecision:
    """Opt this session out of remote mode."""
    session_id = hook_input.session_id

    extra = ""
    if not session_id.strip():
        extra = (
            "\n\n⚠️ No session ID was received, so the session-level disable "
            "could not be recorded."
        )
    else:
        store.disable_session(session_id)

    reason = (
        "✅ Remote mode turned off for this session\n\n"
        f"Session ID: {session_id}\n\n"
        "Global remote mode is still enabled; new tasks will still enter "
        f"remote control.{extra}"
    )
    return HookDecision.block(reason)


def handle_remote_status(store: RemoteStateStore, hook_input: HookInput) -> HookDecision:
    """Report remote mode state; config details only when enabled."""
    if remote_enabled(store):
        config = store.load()
        reason = (
            "📊 Remote mode status\n\n"
            "Status: ✅ enabled\n"
            "Configuration:\n"
            f"- Target WeChat: {config.notification.wxid}\n"
            f"- Listen address: {config.notification.listen}\n"
            f"- Lock file: {_lock_hint(store)}"
        )
    else:
        reason = (
            "📊 Remote mode status\n\n"
            "Status: ❌ disabled\n\n"
            f"Use {REMOTE_ON} to enable remote mode."
        )
    return HookDecision.block(reason)


REMOTE_COMMANDS: dict[str, Callable[[RemoteStateStore, HookInput], HookDecision]] = {
    REMOTE_ON: handle_remote_on,
    REMOTE_OFF: handle_remote_off,
    REMOTE_STATUS: handle_remote_status,
}
