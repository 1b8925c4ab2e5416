"""
Hook Router.

Entry point for every hook the agent host fires at gewe-cc. One process per
event: decode stdin, decide, print one JSON decision, exit.

Event kinds:
- user-prompt-submit: intercepts the >remote-on / >remote-off /
  >remote-status commands; every other prompt is approved untouched.
- stop: the session gate decides whether the agent may stop or must wait
  for remote instructions (block).
- notification: when remote mode is on, relays an idle notice to WeChat.
  Never blocks.

Architecture:
- State is injected (RemoteStateStore) so decisions can be tested without
  touching the filesystem.
- HookDecision objects are used internally and converted to JSON only by
  the CLI at final output.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gewe_cc.hooks.event_log import log_hook_event
from gewe_cc.hooks.idle_notifier import MessengerFactory, notify_idle
from gewe_cc.hooks.remote_commands import REMOTE_COMMANDS
from gewe_cc.hooks.schemas import HookDecision, HookInput
from gewe_cc.lib.errors import (
    GeweCCError,
    MalformedInputError,
    RegistryWriteError,
    UnknownEventKindError,
)
from gewe_cc.lib.gate_types import EventKind, GateVerdict
from gewe_cc.lib.hook_utils import display_cwd, project_name
from gewe_cc.lib.messenger import GeweCli
from gewe_cc.lib.remote_state import ConfigManager, RemoteStateStore
from gewe_cc.lib.session_gate import decide, remote_enabled
from gewe_cc.lib.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

REMOTE_CONTROL_SKILL = "/gewe-cc:remote-control"


def build_stop_reason(hook_input: HookInput) -> str:
    """Block reason for an intercepted Stop.

    Uses the caller's custom text when given, otherwise tells the agent to
    activate the remote-control skill. Context lines are always appended.
    """
    context = (
        "Context:\n"
        f"- Project: {project_name(hook_input.cwd)}\n"
        f"- Directory: {display_cwd(hook_input.cwd)}\n"
        f"- Session: {hook_input.session_id}"
    )

    if hook_input.user_prompt is not None:
        return f"🔄 Remote mode enabled\n\n{hook_input.user_prompt}\n\n{context}"

    return (
        "🔄 Remote mode enabled - if not already active, activate the "
        "remote-control skill now\n\n"
        f"Run: {REMOTE_CONTROL_SKILL}\n\n"
        f"{context}"
    )


class HookRouter:
    def __init__(
        self,
        store: RemoteStateStore | None = None,
        registry: SessionRegistry | None = None,
        messenger_factory: MessengerFactory = GeweCli,
        log_events: bool = True,
        logs_dir: Path | None = None,
    ):
        self.store = store if store is not None else ConfigManager()
        self._registry = registry
        self.messenger_factory = messenger_factory
        self.log_events = log_events
        self.logs_dir = logs_dir

    @property
    def registry(self) -> SessionRegistry:
        if self._registry is None:
            self._registry = SessionRegistry()
        return self._registry

    # --- Decoding ---

    @staticmethod
    def parse_event_kind(value: EventKind | str) -> EventKind:
        """Map the command-line selector to an EventKind."""
        try:
            return EventKind(value)
        except ValueError:
            known = ", ".join(k.value for k in EventKind)
            raise UnknownEventKindError(
                f"Unknown hook type: {value!r} (expected one of: {known})"
            ) from None

    @staticmethod
    def normalize_input(raw_event: str | bytes | Mapping[str, Any]) -> HookInput:
        """Decode raw stdin (or an already-parsed mapping) into a HookInput."""
        if isinstance(raw_event, (str, bytes)):
            try:
                data = json.loads(raw_event)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise MalformedInputError(f"Failed to parse hook input: {e}") from e
        else:
            data = raw_event

        if not isinstance(data, Mapping):
            raise MalformedInputError(
                f"Hook input must be a JSON object, got {type(data).__name__}"
            )

        try:
            return HookInput.model_validate(dict(data))
        except ValidationError as e:
            raise MalformedInputError(f"Invalid hook input: {e}") from e

    # --- Dispatch ---

    def handle(
        self, event_kind: EventKind | str, raw_event: str | bytes | Mapping[str, Any]
    ) -> HookDecision:
        """Decode one event, dispatch it, and return the decision."""
        kind = self.parse_event_kind(event_kind)

        try:
            hook_input = self.normalize_input(raw_event)
            handlers = {
                EventKind.USER_PROMPT_SUBMIT: self.handle_user_prompt_submit,
                EventKind.STOP: self.handle_stop,
                EventKind.NOTIFICATION: self.handle_notification,
            }
            decision = handlers[kind](hook_input)
        except GeweCCError as e:
            self._log(kind, raw_event, error=str(e))
            raise

        self._log(kind, hook_input.model_dump(exclude_none=True), output=decision)
        return decision

    def handle_user_prompt_submit(self, hook_input: HookInput) -> HookDecision:
        """Run a remote command if the prompt is one; approve anything else."""
        responder = REMOTE_COMMANDS.get(hook_input.prompt or "")
        if responder is None:
            return HookDecision.approve()

        logger.info(f"Remote command {hook_input.prompt} (session {hook_input.session_id!r})")
        return responder(self.store, hook_input)

    def handle_stop(self, hook_input: HookInput) -> HookDecision:
        """Hold the session for remote control unless the gate lets it stop."""
        verdict = decide(
            EventKind.STOP,
            hook_input.session_id,
            hook_input.stop_hook_active,
            self.store,
        )
        if verdict is GateVerdict.PROCEED:
            return HookDecision.approve()

        if hook_input.transcript_path:
            self._register_transcript(hook_input.session_id, hook_input.transcript_path)

        return HookDecision.block(build_stop_reason(hook_input))

    def handle_notification(self, hook_input: HookInput) -> HookDecision:
        """Relay an idle notice when remote mode is on. Always approves."""
        if not remote_enabled(self.store):
            return HookDecision.approve()

        notify_idle(
            hook_input.session_id,
            hook_input.cwd,
            self.store,
            messenger_factory=self.messenger_factory,
        )
        return HookDecision.approve()

    # --- Side effects ---

    def _register_transcript(self, session_id: str, transcript_path: str) -> None:
        # Registration failure must not turn an intercept into an error
        try:
            self.registry.register(session_id, transcript_path)
        except (RegistryWriteError, OSError) as e:
            logger.warning(f"Failed to register session {session_id}: {e}")

    def _log(
        self,
        kind: EventKind,
        input_data: Any,
        output: HookDecision | None = None,
        error: str | None = None,
    ) -> None:
        if not self.log_events:
            return
        if isinstance(input_data, bytes):
            input_data = input_data.decode("utf-8", errors="replace")
        if not isinstance(input_data, Mapping):
            input_data = {"raw": input_data}
        log_hook_event(
            kind.value,
            dict(input_data),
            output=output,
            error=error,
            exit_code=1 if error else 0,
            logs_dir=self.logs_dir,
        )
