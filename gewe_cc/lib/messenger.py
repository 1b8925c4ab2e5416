"""
WeChat messaging via the gewe-cli command-line tool.

gewe-cc never talks to WeChat itself; it shells out to gewe-cli:

- send-text:  `gewe-cli message send-text --to <wxid> --content <text>`
- wait-reply: `gewe-cli wait-reply --to-wxid <wxid> --listen <addr> -M text:<msg> [--timeout N]`
- send-link:  `gewe-cli send-link --to-wxid <wxid> --title ... --desc ... --link-url ... --thumb-url ...`

wait-reply exit codes: 1 = timed out, 2 = send failed, 3 = webhook could not
start on the listen address.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path

from gewe_cc.lib.config import Config
from gewe_cc.lib.errors import MessengerError

logger = logging.getLogger(__name__)

CONTINUE_PROMPT = 'Reply anything to continue, reply "stop" to end remote mode.'


class GeweCli:
    """Thin subprocess wrapper around gewe-cli, configured from Config."""

    def __init__(self, config: Config):
        self.config = config
        self.command = config.gewe_cli.command

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        cmd = [self.command, *args]
        logger.debug(f"Running {cmd[:3]}...")
        try:
            return subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise MessengerError(
                f"Failed to run {self.command}, is gewe-cli installed? ({e})"
            ) from e

    def send_text(self, to: str, content: str) -> None:
        """Send a text message without waiting for a reply.

        Raises:
            MessengerError: Empty target, gewe-cli missing, or non-zero exit
        """
        if not to:
            raise MessengerError("Target wxid must not be empty")

        result = self._run(["message", "send-text", "--to", to, "--content", content])
        if result.returncode != 0:
            raise MessengerError(f"Failed to send message: {result.stderr.strip()}")

    def wait_reply(
        self,
        message: str,
        to_wxid: str | None = None,
        listen: str | None = None,
        timeout: int | None = None,
    ) -> str:
        """Send a message and block until the human replies.

        Args:
            message: Text to send
            to_wxid: Override notification.wxid
            listen: Override notification.listen (webhook address for the reply)
            timeout: Override gewe_cli.timeout in seconds; 0 waits forever

        Returns:
            The reply text, stripped

        Raises:
            MessengerError: Missing wxid, timeout, send or webhook failure
        """
        wxid = to_wxid if to_wxid is not None else self.config.notification.wxid
        listen_addr = listen if listen is not None else self.config.notification.listen
        timeout_secs = timeout if timeout is not None else self.config.gewe_cli.timeout

        if not wxid:
            raise MessengerError(
                "Target wxid must not be empty.\n"
                "Set it with one of:\n"
                "  1. gewe-cc init --wxid <wxid>\n"
                "  2. gewe-cc config --wxid <wxid>\n"
                "  3. --to-wxid <wxid>"
            )

        args = [
            "wait-reply",
            "--to-wxid",
            wxid,
            "--listen",
            listen_addr,
            "-M",
            f"text:{message}",
        ]
        # No --timeout means gewe-cli waits forever
        if timeout_secs > 0:
            args += ["--timeout", str(timeout_secs)]

        result = self._run(args)
        if result.returncode == 1:
            if timeout_secs > 0:
                raise MessengerError(f"Timed out waiting for WeChat reply ({timeout_secs}s)")
            raise MessengerError("Timed out waiting for WeChat reply")
        if result.returncode == 2:
            raise MessengerError("Failed to send WeChat message")
        if result.returncode == 3:
            raise MessengerError(
                f"Webhook failed to start, check listen address: {listen_addr}"
            )
        if result.returncode != 0:
            raise MessengerError(
                f"{self.command} failed (exit code {result.returncode}): "
                f"{result.stderr.strip()}"
            )

        return result.stdout.strip()

    def send_link_and_wait(
        self, session_id: str, summary: str, project: str | None = None
    ) -> str:
        """Send a transcript link card for a session, then wait for a reply.

        The link points at `<transcript_domain>/<session_id>`.
        """
        notification = self.config.notification
        if not notification.wxid:
            raise MessengerError(
                "Target wxid must not be empty.\nRun: gewe-cc config --wxid <wxid>"
            )
        if not notification.transcript_domain:
            raise MessengerError(
                "Transcript domain not configured.\n"
                "Run: gewe-cc config --transcript-domain <domain>"
            )

        domain = notification.transcript_domain.rstrip("/")
        if project is None:
            project = Path.cwd().name or "unknown"
        # Timestamp query defeats WeChat's thumbnail cache
        thumb_url = f"{domain}/assets/thumb.png?t={int(time.time())}"

        result = self._run(
            [
                "send-link",
                "--to-wxid",
                notification.wxid,
                "--title",
                f"📝 Task complete - {project}",
                "--desc",
                summary,
                "--link-url",
                f"{domain}/{session_id}",
                "--thumb-url",
                thumb_url,
            ]
        )
        if result.returncode != 0:
            raise MessengerError(f"Failed to send link card: {result.stderr.strip()}")

        return self.wait_reply(CONTINUE_PROMPT)
