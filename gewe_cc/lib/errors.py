"""Exception hierarchy for gewe-cc.

Fatal errors (bad hook input, unknown hook kind, missing config where a
block reason needs it) propagate to the CLI, which reports them on stderr
and exits non-zero. Registry and messenger failures inside hooks are
logged and swallowed by their callers.
"""


class GeweCCError(Exception):
    """Base class for all gewe-cc errors."""


class MalformedInputError(GeweCCError):
    """Hook stdin is not a JSON object matching the hook input shape."""


class UnknownEventKindError(GeweCCError):
    """Hook invoked with an event kind other than the three known ones."""


class ConfigUnavailableError(GeweCCError):
    """Config record is missing, unreadable or unparsable."""


class RegistryWriteError(GeweCCError):
    """Session registry could not be persisted."""


class MessengerError(GeweCCError):
    """Invoking gewe-cli failed or it exited with an error."""
