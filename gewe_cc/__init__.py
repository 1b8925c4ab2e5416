"""gewe-cc: remote control for coding-agent sessions over WeChat."""

__version__ = "0.1.0"
