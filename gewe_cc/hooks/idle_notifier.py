"""
Idle notification relay.

When the host reports that a session has gone quiet (Notification hook) and
remote mode is on, send a WeChat text so the human knows to check on it.

Best effort: config and messenger failures are logged and swallowed. The
call blocks on the gewe-cli subprocess, which is fine because the host does
not wait on Notification hooks before continuing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from gewe_cc.lib.config import Config
from gewe_cc.lib.errors import ConfigUnavailableError, MessengerError
from gewe_cc.lib.hook_utils import project_name
from gewe_cc.lib.messenger import GeweCli
from gewe_cc.lib.remote_state import RemoteStateStore

logger = logging.getLogger(__name__)

IDLE_SECONDS = 60


class Messenger(Protocol):
    def send_text(self, to: str, content: str) -> None: ...


MessengerFactory = Callable[[Config], Messenger]


def build_idle_message(session_id: str, cwd: str | None) -> str:
    return (
        "[Claude Code]\n"
        "⚠️ Session may be stuck\n"
        f"📁 Project: {project_name(cwd)}\n"
        f"🕐 No response for {IDLE_SECONDS}+ seconds\n\n"
        "Please check whether the terminal is waiting for input.\n"
        f"Session ID: {session_id}"
    )


def notify_idle(
    session_id: str,
    cwd: str | None,
    store: RemoteStateStore,
    messenger_factory: MessengerFactory = GeweCli,
) -> None:
    """Send the idle notice to the configured wxid. Never raises."""
    try:
        config = store.load()
    except ConfigUnavailableError as e:
        logger.warning(f"Idle notification skipped, config unavailable: {e}")
        return
    except Exception as e:
        logger.warning(f"Idle notification skipped, config load failed: {e}")
        return

    message = build_idle_message(session_id, cwd)
    try:
        messenger = messenger_factory(config)
        messenger.send_text(config.notification.wxid, message)
        logger.debug(f"Idle notification sent for session {session_id}")
    except (MessengerError, OSError) as e:
        logger.warning(f"⚠️ Failed to send idle notification: {e}")
    except Exception as e:
        logger.warning(f"⚠️ Unexpected error sending idle notification: {e}")
