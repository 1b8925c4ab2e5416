from enum import Enum, StrEnum


class EventKind(StrEnum):
    """Hook event kinds, named as the host passes them on the command line."""

    USER_PROMPT_SUBMIT = "user-prompt-submit"
    STOP = "stop"
    NOTIFICATION = "notification"


class GateVerdict(Enum):
    """Verdict of the session gate."""

    PROCEED = "proceed"  # let the host continue (approve)
    INTERCEPT = "intercept"  # hold the session for remote control (block)
