"""
cogsimple.errors
Exceptions raised by a CogServer session.
"""
from __future__ import annotations


class StorageError(IOError):
    """Base class for every error raised by a session."""


class InvalidURI(StorageError, ValueError):
    """The connection identifier is not a `cog://` URI."""


class ConnectionError(StorageError):
    """Address lookup, socket creation or connect failed."""

    def __init__(self, *args, **kwargs):
        self.host = kwargs.pop("host", None)
        super().__init__(*args, **kwargs)


class NotConnected(StorageError):
    """send/receive on a session that is not connected."""


class TransportError(StorageError):
    """A send or recv failed mid-session; the session should be closed."""


class PeerClosed(StorageError):
    """The server closed the connection."""
