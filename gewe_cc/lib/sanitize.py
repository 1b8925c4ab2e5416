"""Masking of identifying values for terminal display."""

from __future__ import annotations

LOCAL_HOSTS = ("0.0.0.0", "127.0.0.1", "localhost", "::1")


def sanitize_wxid(wxid: str) -> str:
    """Mask a WeChat id, keeping just enough to recognise it.

    >>> sanitize_wxid("wxid_mly499mvz23o21")
    'wxid_***o21'
    >>> sanitize_wxid("user123456789")
    'user12***789'
    """
    if not wxid:
        return ""

    if wxid.startswith("wxid_"):
        id_part = wxid[len("wxid_"):]
        if len(id_part) < 3:
            return wxid
        return f"wxid_***{id_part[-3:]}"

    if len(wxid) <= 9:
        return wxid
    return f"{wxid[:6]}***{wxid[-3:]}"


def sanitize_listen_addr(addr: str) -> str:
    """Mask a non-local listen address, keeping the port.

    >>> sanitize_listen_addr("192.168.1.100:4399")
    '*.*.*.*:4399'
    >>> sanitize_listen_addr("127.0.0.1:4399")
    '127.0.0.1:4399'
    """
    if addr.startswith(LOCAL_HOSTS):
        return addr

    if ":" in addr:
        host, port = addr.rsplit(":", 1)
        if host in LOCAL_HOSTS:
            return addr
        return f"*.*.*.*:{port}"

    return "*.*.*.*"
