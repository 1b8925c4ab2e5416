"""Config record for gewe-cc.

The record is a YAML file (default ~/.gewe-cc/config.yaml):

    remote:
      enabled: false
    notification:
      channel: wechat
      wxid: wxid_abc123
      listen: 0.0.0.0:4399
      transcript_domain: https://cc.example.com
    gewe_cli:
      command: gewe-cli
      timeout: 0

Missing sections and fields take their defaults. A missing, unreadable or
unparsable file raises ConfigUnavailableError; callers decide whether that
is fatal or means "remote mode disabled".
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from gewe_cc.lib.errors import ConfigUnavailableError
from gewe_cc.lib.hook_utils import atomic_write_text

logger = logging.getLogger(__name__)


class RemoteConfig(BaseModel):
    """Global remote mode switch (mirrored by the lock artifact)."""

    enabled: bool = False


class NotificationConfig(BaseModel):
    """Where notifications go and where replies are received."""

    # wechat, telegram, dingtalk, ... (only wechat is wired up)
    channel: str = "wechat"
    wxid: str = ""
    listen: str = ""
    transcript_domain: str = ""


class GeweCliConfig(BaseModel):
    """How to invoke the gewe-cli messaging tool."""

    command: str = "gewe-cli"
    # Seconds; 0 means wait forever (no --timeout passed to gewe-cli)
    timeout: int = Field(default=0, ge=0)


class Config(BaseModel):
    """Full persisted config record."""

    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    gewe_cli: GeweCliConfig = Field(default_factory=GeweCliConfig)


def load_config(path: Path) -> Config:
    """Load and validate the config record.

    Raises:
        ConfigUnavailableError: File missing, unreadable, not YAML, or
            not matching the Config shape.
    """
    if not path.exists():
        raise ConfigUnavailableError(
            f"Config file not found: {path}\nRun first: gewe-cc init"
        )

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigUnavailableError(f"Failed to read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigUnavailableError(f"Failed to parse config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigUnavailableError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigUnavailableError(f"Invalid config file {path}: {e}") from e


def save_config(config: Config, path: Path) -> None:
    """Write the config record atomically.

    Raises:
        OSError: If the file cannot be written
    """
    content = yaml.safe_dump(
        config.model_dump(mode="json"),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    atomic_write_text(path, content)
    logger.debug(f"Saved config to {path}")
