from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# --- Input Schema ---


class HookInput(BaseModel):
    """
    One hook event as read from stdin.

    Every field is optional: the host sends different subsets per event kind,
    and missing or unknown fields must never be an error.
    """

    model_config = ConfigDict(extra="ignore")

    session_id: str = Field(
        default="", description="Session identifier; may be empty."
    )
    prompt: str | None = Field(None, description="Submitted prompt (UserPromptSubmit).")
    cwd: str | None = Field(None, description="Working directory of the agent session.")
    transcript_path: str | None = Field(None, description="Transcript file path (Stop).")
    stop_hook_active: bool = Field(
        default=False,
        description="True when the host is replaying Stop hooks after a block.",
    )
    user_prompt: str | None = Field(
        None, description="Custom text to use as the Stop block reason."
    )

    @field_validator("session_id", mode="before")
    @classmethod
    def _null_session_id(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("stop_hook_active", mode="before")
    @classmethod
    def _null_stop_hook_active(cls, value: Any) -> Any:
        return False if value is None else value


# --- Output Schema ---


class HookDecision(BaseModel):
    """
    Decision written to stdout.

    Serializes to exactly one of:
        {"decision":"approve"}
        {"decision":"block","reason":"..."}
    Field order is the wire order.
    """

    decision: Literal["approve", "block"]
    reason: str | None = None

    @model_validator(mode="after")
    def _reason_matches_decision(self) -> "HookDecision":
        if self.decision == "block" and not self.reason:
            raise ValueError("block decision requires a non-empty reason")
        if self.decision == "approve" and self.reason is not None:
            raise ValueError("approve decision carries no reason")
        return self

    @classmethod
    def approve(cls) -> "HookDecision":
        return cls(decision="approve")

    @classmethod
    def block(cls, reason: str) -> "HookDecision":
        return cls(decision="block", reason=reason)

    @property
    def is_block(self) -> bool:
        return self.decision == "block"

    def to_json(self) -> str:
        """Compact JSON line for the host."""
        return self.model_dump_json(exclude_none=True)


# --- Hook event log ---


class HookLogEntry(BaseModel):
    """One line of the per-day hook event log."""

    hook_event: str
    logged_at: str
    session_id: str = ""
    exit_code: int = 0
    input: dict[str, Any] = Field(default_factory=dict)
    output: dict[str, Any] | None = None
    error: str | None = None
