"""Shared fixtures for gewe-cc tests."""

from __future__ import annotations

import functools
from pathlib import Path

import pytest

from gewe_cc.hooks.router import HookRouter
from gewe_cc.lib.config import Config, NotificationConfig
from gewe_cc.lib.errors import ConfigUnavailableError, MessengerError
from gewe_cc.lib.paths import get_lock_path
from gewe_cc.lib.remote_state import ConfigManager
from gewe_cc.lib.session_registry import SessionRegistry

TEST_WXID = "wxid_tester4242"
TEST_LISTEN = "0.0.0.0:4399"


def make_config(enabled: bool = False) -> Config:
    config = Config(notification=NotificationConfig(wxid=TEST_WXID, listen=TEST_LISTEN))
    config.remote.enabled = enabled
    return config


class InMemoryStateStore:
    """RemoteStateStore double: no filesystem, inspectable state."""

    def __init__(
        self,
        enabled: bool = False,
        disabled_sessions: set[str] | None = None,
        config_available: bool = True,
    ):
        self.config = make_config(enabled)
        self.lock = enabled
        self.disabled_sessions = set(disabled_sessions or ())
        self.config_available = config_available
        self.enable_calls = 0
        self.lock_file = get_lock_path()

    def load(self) -> Config:
        if not self.config_available:
            raise ConfigUnavailableError("config missing")
        return self.config.model_copy(deep=True)

    def save(self, config: Config) -> None:
        self.config = config.model_copy(deep=True)
        self.config_available = True

    def is_remote_enabled(self) -> bool:
        return self.lock

    def enable_remote(self) -> None:
        self.enable_calls += 1
        if not self.config_available:
            self.config = make_config()
            self.config_available = True
        self.config.remote.enabled = True
        self.lock = True

    def disable_remote(self) -> None:
        self.config.remote.enabled = False
        self.lock = False

    def disable_session(self, session_id: str) -> None:
        if session_id.strip():
            self.disabled_sessions.add(session_id)

    def is_session_disabled(self, session_id: str) -> bool:
        return bool(session_id.strip()) and session_id in self.disabled_sessions


class BrokenStateStore(InMemoryStateStore):
    """Every read blows up, as if the state directory were unreachable."""

    def is_remote_enabled(self) -> bool:
        raise OSError("state directory unavailable")

    def is_session_disabled(self, session_id: str) -> bool:
        raise OSError("state directory unavailable")


class RecordingMessenger:
    """Messenger double appending every send_text call to a shared outbox."""

    def __init__(self, config: Config, outbox: list[tuple[str, str]]):
        self.config = config
        self.outbox = outbox

    def send_text(self, to: str, content: str) -> None:
        self.outbox.append((to, content))


class FailingMessenger(RecordingMessenger):
    def send_text(self, to: str, content: str) -> None:
        self.outbox.append((to, content))
        raise MessengerError("gewe-cli exited with status 2")


@pytest.fixture(autouse=True)
def gewe_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point $GEWE_CC_HOME at a temp dir so no test touches ~/.gewe-cc."""
    home = tmp_path / "gewe-home"
    monkeypatch.setenv("GEWE_CC_HOME", str(home))
    return home


@pytest.fixture
def outbox() -> list[tuple[str, str]]:
    """Messages sent by this test's messenger doubles, as (to, content)."""
    return []


@pytest.fixture
def recording_messenger(outbox):
    return functools.partial(RecordingMessenger, outbox=outbox)


@pytest.fixture
def failing_messenger(outbox):
    return functools.partial(FailingMessenger, outbox=outbox)


@pytest.fixture
def manager(gewe_home: Path) -> ConfigManager:
    return ConfigManager(gewe_home)


@pytest.fixture
def memory_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def registry(gewe_home: Path) -> SessionRegistry:
    return SessionRegistry(gewe_home / "sessions.json")


@pytest.fixture
def make_router(registry: SessionRegistry, gewe_home: Path, recording_messenger):
    """Build a HookRouter around a given store with a recording messenger."""

    def _make(store, messenger_factory=None, log_events: bool = False):
        return HookRouter(
            store=store,
            registry=registry,
            messenger_factory=messenger_factory or recording_messenger,
            log_events=log_events,
            logs_dir=gewe_home / "logs",
        )

    return _make
