"""Error kinds raised by the tracker client, the node tree and the config loader."""


class RedmineFSError(Exception):
    """Base class for all redminefs errors."""


class TrackerError(RedmineFSError):
    """A call to the remote tracker failed."""


class TransportError(TrackerError):
    """The tracker could not be reached or answered garbage."""


class AuthError(TrackerError):
    """The tracker rejected the API key."""


class NotFoundError(TrackerError):
    """The requested entity does not exist."""


class NotADirectory(NotFoundError):
    """A path tried to descend through a file."""


class MalformedNameError(RedmineFSError):
    """A directory entry name could not be parsed into an identifier."""


class ConfigError(RedmineFSError):
    """Settings file is missing or invalid."""
