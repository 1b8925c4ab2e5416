"""Tests for the gewe-cli subprocess wrapper."""

import subprocess

import pytest
from conftest import TEST_LISTEN, TEST_WXID, make_config

from gewe_cc.lib.errors import MessengerError
from gewe_cc.lib.messenger import CONTINUE_PROMPT, GeweCli


class FakeRun:
    """Replacement for subprocess.run returning scripted results."""

    def __init__(self, *results: tuple[int, str, str]):
        self.results = list(results) or [(0, "", "")]
        self.calls: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        code, out, err = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        return subprocess.CompletedProcess(cmd, code, stdout=out, stderr=err)


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch):
    def _install(*results: tuple[int, str, str]) -> FakeRun:
        fake = FakeRun(*results)
        monkeypatch.setattr(subprocess, "run", fake)
        return fake

    return _install


# --- send_text ---


def test_send_text_invocation(fake_run) -> None:
    run = fake_run((0, "", ""))
    GeweCli(make_config()).send_text("wxid_x", "hello")
    assert run.calls == [
        ["gewe-cli", "message", "send-text", "--to", "wxid_x", "--content", "hello"]
    ]


def test_send_text_uses_configured_command(fake_run) -> None:
    run = fake_run((0, "", ""))
    config = make_config()
    config.gewe_cli.command = "/opt/bin/gewe-cli"
    GeweCli(config).send_text("wxid_x", "hi")
    assert run.calls[0][0] == "/opt/bin/gewe-cli"


def test_send_text_empty_target(fake_run) -> None:
    run = fake_run()
    with pytest.raises(MessengerError, match="empty"):
        GeweCli(make_config()).send_text("", "hello")
    assert run.calls == []


def test_send_text_nonzero_exit(fake_run) -> None:
    fake_run((2, "", "network down"))
    with pytest.raises(MessengerError, match="network down"):
        GeweCli(make_config()).send_text("wxid_x", "hello")


def test_missing_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    def _missing(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(subprocess, "run", _missing)
    with pytest.raises(MessengerError, match="is gewe-cli installed"):
        GeweCli(make_config()).send_text("wxid_x", "hello")


# --- wait_reply ---


def test_wait_reply_defaults_from_config(fake_run) -> None:
    run = fake_run((0, "  continue please \n", ""))
    reply = GeweCli(make_config()).wait_reply("done?")
    assert reply == "continue please"
    assert run.calls == [
        [
            "gewe-cli",
            "wait-reply",
            "--to-wxid",
            TEST_WXID,
            "--listen",
            TEST_LISTEN,
            "-M",
            "text:done?",
        ]
    ]


def test_wait_reply_overrides_and_timeout(fake_run) -> None:
    run = fake_run((0, "ok", ""))
    GeweCli(make_config()).wait_reply(
        "m", to_wxid="wxid_other", listen="127.0.0.1:1", timeout=30
    )
    cmd = run.calls[0]
    assert cmd[cmd.index("--to-wxid") + 1] == "wxid_other"
    assert cmd[cmd.index("--listen") + 1] == "127.0.0.1:1"
    assert cmd[-2:] == ["--timeout", "30"]


def test_wait_reply_zero_timeout_waits_forever(fake_run) -> None:
    run = fake_run((0, "ok", ""))
    GeweCli(make_config()).wait_reply("m", timeout=0)
    assert "--timeout" not in run.calls[0]


def test_wait_reply_config_timeout(fake_run) -> None:
    run = fake_run((0, "ok", ""))
    config = make_config()
    config.gewe_cli.timeout = 120
    GeweCli(config).wait_reply("m")
    assert run.calls[0][-2:] == ["--timeout", "120"]


def test_wait_reply_requires_wxid(fake_run) -> None:
    fake_run()
    config = make_config()
    config.notification.wxid = ""
    with pytest.raises(MessengerError, match="gewe-cc config --wxid"):
        GeweCli(config).wait_reply("m")


@pytest.mark.parametrize(
    ("code", "timeout", "match"),
    [
        (1, 45, r"Timed out waiting for WeChat reply \(45s\)"),
        (1, 0, "Timed out waiting for WeChat reply"),
        (2, 0, "Failed to send WeChat message"),
        (3, 0, "check listen address: 0.0.0.0:4399"),
        (9, 0, r"exit code 9\): kaboom"),
    ],
)
def test_wait_reply_exit_codes(fake_run, code: int, timeout: int, match: str) -> None:
    fake_run((code, "", "kaboom"))
    with pytest.raises(MessengerError, match=match):
        GeweCli(make_config()).wait_reply("m", timeout=timeout)


# --- send_link_and_wait ---


def test_send_link_and_wait(fake_run) -> None:
    run = fake_run((0, "", ""), (0, "go on", ""))
    config = make_config()
    config.notification.transcript_domain = "https://cc.example.com/"

    reply = GeweCli(config).send_link_and_wait("sess-1", "All tests pass", project="api")

    assert reply == "go on"
    link_cmd, wait_cmd = run.calls
    assert link_cmd[1] == "send-link"
    assert link_cmd[link_cmd.index("--link-url") + 1] == "https://cc.example.com/sess-1"
    assert link_cmd[link_cmd.index("--desc") + 1] == "All tests pass"
    assert link_cmd[link_cmd.index("--title") + 1].endswith("Task complete - api")
    assert link_cmd[link_cmd.index("--thumb-url") + 1].startswith(
        "https://cc.example.com/assets/thumb.png?t="
    )
    assert wait_cmd[wait_cmd.index("-M") + 1] == f"text:{CONTINUE_PROMPT}"


def test_send_link_requires_domain(fake_run) -> None:
    run = fake_run()
    with pytest.raises(MessengerError, match="transcript-domain"):
        GeweCli(make_config()).send_link_and_wait("s1", "summary")
    assert run.calls == []


def test_send_link_failure(fake_run) -> None:
    fake_run((1, "", "bad thumb"))
    config = make_config()
    config.notification.transcript_domain = "https://cc.example.com"
    with pytest.raises(MessengerError, match="bad thumb"):
        GeweCli(config).send_link_and_wait("s1", "summary", project="p")
