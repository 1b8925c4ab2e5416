"""
gewe-cc command line.

    gewe-cc hook <user-prompt-submit|stop|notification>   (called by the host)
    gewe-cc on | off [--session-id ID] | status
    gewe-cc config [--wxid] [--listen] [--timeout] [--transcript-domain]
    gewe-cc notify -M MSG [--to-wxid]
    gewe-cc wait-reply -M MSG [--to-wxid] [--listen] [-t SECONDS]
    gewe-cc send-link --session-id ID --summary TEXT
    gewe-cc init [--wxid] [--listen] [--force]

stdout is reserved for command output (for `hook`: exactly one JSON
decision). Diagnostics go to stderr through logging. Fatal errors exit 1.
"""

from __future__ import annotations

import argparse
import logging
import sys

from gewe_cc import __version__
from gewe_cc.hooks.router import HookRouter
from gewe_cc.lib.config import Config
from gewe_cc.lib.errors import GeweCCError
from gewe_cc.lib.messenger import GeweCli
from gewe_cc.lib.paths import display_path, find_executable
from gewe_cc.lib.remote_state import ConfigManager
from gewe_cc.lib.sanitize import sanitize_listen_addr, sanitize_wxid

logger = logging.getLogger("gewe_cc")

RULE = "═" * 39


def _banner(title: str) -> None:
    print(RULE)
    print(f"  {title}")
    print(RULE)
    print()


def _timeout_label(timeout: int) -> str:
    return "wait forever" if timeout == 0 else f"{timeout} s"


# --- Commands ---


def cmd_hook(args: argparse.Namespace) -> int:
    # Reject unknown kinds before touching stdin
    kind = HookRouter.parse_event_kind(args.hook_type)
    raw = sys.stdin.buffer.read()
    decision = HookRouter().handle(kind, raw)
    print(decision.to_json())
    return 0


def cmd_on(args: argparse.Namespace) -> int:
    mgr = ConfigManager()
    mgr.enable_remote()
    config = mgr.load()

    _banner("✅ Remote mode enabled")
    print("Configuration:")
    print(f"  Target WeChat:  {sanitize_wxid(config.notification.wxid)}")
    print(f"  Listen address: {sanitize_listen_addr(config.notification.listen)}")
    print(f"  Lock file:      {display_path(mgr.lock_file)}")
    print()
    print("When a task finishes, the session will wait for instructions from WeChat.")
    return 0


def cmd_off(args: argparse.Namespace) -> int:
    mgr = ConfigManager()

    if args.session_id is not None:
        mgr.disable_session(args.session_id)
        _banner("🛑 Session closed")
        print(f"  Session ID: {args.session_id}")
        print()
        print("This session is done, but global remote mode is still enabled.")
        print("New tasks will still enter remote control.")
        return 0

    mgr.disable_remote()
    _banner("❌ Remote mode disabled")
    print("Tasks will stop normally and no longer wait for WeChat instructions.")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    mgr = ConfigManager()
    _banner("📊 Remote mode status")

    if not mgr.is_remote_enabled():
        print("  Status: ❌ disabled")
        print()
        print("  Enable: gewe-cc on")
        return 0

    config = mgr.load()
    print("  Status: ✅ enabled")
    print()
    print("  Configuration:")
    print(f"    Target WeChat:  {sanitize_wxid(config.notification.wxid)}")
    print(f"    Listen address: {sanitize_listen_addr(config.notification.listen)}")
    print(f"    Lock file:      {display_path(mgr.lock_file)}")
    print()
    print("  Disable: gewe-cc off")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    mgr = ConfigManager()
    updates = (args.wxid, args.listen, args.timeout, args.transcript_domain)

    if all(v is None for v in updates):
        config = mgr.load()
        notification = config.notification
        _banner("⚙️  Configuration")
        print("Current configuration:")
        print(f"  Target WeChat:     {notification.wxid}")
        print(f"  Listen address:    {notification.listen}")
        print(f"  Timeout:           {_timeout_label(config.gewe_cli.timeout)}")
        print(f"  Transcript domain: {notification.transcript_domain or 'not configured'}")
        print(f"  Config file:       {mgr.config_file}")
        print()
        print("Change with:")
        print("  gewe-cc config --wxid <wxid>")
        print("  gewe-cc config --listen <address>")
        print("  gewe-cc config --timeout <seconds>   # 0 waits forever")
        print("  gewe-cc config --transcript-domain <domain>")
        return 0

    mgr.update_notification(args.wxid, args.listen, args.transcript_domain)
    if args.timeout is not None:
        mgr.set_timeout(args.timeout)

    _banner("✅ Configuration updated")
    if args.wxid is not None:
        print(f"  Target WeChat:     {args.wxid}")
    if args.listen is not None:
        print(f"  Listen address:    {args.listen}")
    if args.timeout is not None:
        print(f"  Timeout:           {_timeout_label(args.timeout)}")
    if args.transcript_domain is not None:
        print(f"  Transcript domain: {args.transcript_domain}")
    return 0


def cmd_notify(args: argparse.Namespace) -> int:
    config = ConfigManager().load()
    wxid = args.to_wxid if args.to_wxid is not None else config.notification.wxid
    GeweCli(config).send_text(wxid, args.message)
    print("✅ Message sent")
    return 0


def cmd_wait_reply(args: argparse.Namespace) -> int:
    config = ConfigManager().load()
    reply = GeweCli(config).wait_reply(
        args.message, to_wxid=args.to_wxid, listen=args.listen, timeout=args.timeout
    )
    print(reply)
    return 0


def cmd_send_link(args: argparse.Namespace) -> int:
    config = ConfigManager().load()
    reply = GeweCli(config).send_link_and_wait(args.session_id, args.summary)
    print(reply)
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    _banner("gewe-cc setup")

    print("Checking environment...")
    gewe_cli = find_executable("gewe-cli")
    if gewe_cli is None:
        print("  gewe-cli ... ❌ not installed")
        print()
        print("Install gewe-cli and make sure it is on PATH, then run `gewe-cc init` again.")
        return 1
    print(f"  gewe-cli ... ✅ {gewe_cli}")
    print()

    mgr = ConfigManager()
    if mgr.config_file.exists() and not args.force:
        print(f"Config already exists: {mgr.config_file}")
        print("Use `gewe-cc config` to change it, or `gewe-cc init --force` to reset.")
        return 0

    config = Config()
    if args.wxid is not None:
        config.notification.wxid = args.wxid
    if args.listen is not None:
        config.notification.listen = args.listen
    mgr.save(config)

    print(f"✅ Config written: {mgr.config_file}")
    print()
    print("Next:")
    print("  gewe-cc on        # enable remote mode")
    print("  >remote-on        # or from inside an agent session")
    return 0


# --- Parser ---


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gewe-cc", description="Remote control for coding-agent sessions over WeChat"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("hook", help="Handle a hook event (called by the agent host)")
    p.add_argument("hook_type", help="user-prompt-submit, stop or notification")
    p.set_defaults(func=cmd_hook)

    p = sub.add_parser("on", help="Enable global remote mode")
    p.set_defaults(func=cmd_on)

    p = sub.add_parser("off", help="Disable global remote mode, or one session")
    p.add_argument("--session-id", help="Only disable this session")
    p.set_defaults(func=cmd_off)

    p = sub.add_parser("status", help="Show remote mode status")
    p.set_defaults(func=cmd_status)

    p = sub.add_parser("config", help="Show or change configuration")
    p.add_argument("--wxid")
    p.add_argument("--listen")
    p.add_argument("--timeout", type=int, help="Seconds, 0 waits forever")
    p.add_argument("--transcript-domain")
    p.set_defaults(func=cmd_config)

    p = sub.add_parser("notify", help="Send a message without waiting")
    p.add_argument("-M", "--message", required=True)
    p.add_argument("--to-wxid")
    p.set_defaults(func=cmd_notify)

    p = sub.add_parser("wait-reply", help="Send a message and wait for the reply")
    p.add_argument("-M", "--message", required=True)
    p.add_argument("--to-wxid")
    p.add_argument("--listen")
    p.add_argument("-t", "--timeout", type=int)
    p.set_defaults(func=cmd_wait_reply)

    p = sub.add_parser("send-link", help="Send a transcript link card and wait for the reply")
    p.add_argument("--session-id", required=True)
    p.add_argument("--summary", required=True)
    p.set_defaults(func=cmd_send_link)

    p = sub.add_parser("init", help="Check dependencies and write a default config")
    p.add_argument("--wxid")
    p.add_argument("--listen")
    p.add_argument("--force", action="store_true", help="Overwrite an existing config")
    p.set_defaults(func=cmd_init)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return args.func(args)
    except (GeweCCError, OSError) as e:
        logger.error(f"{e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
