"""
cogsimple.storage
A cheap, simple CogServer-backed storage session: one persistent TCP
connection per URI, commands out, newline-terminated replies back.
"""
from __future__ import annotations

import enum
import logging
import threading
from typing import Optional

from .errors import NotConnected, PeerClosed
from .handshake import client_handshake, open_socket, tune_socket
from .protocol import SHELL_SEXPR, handshake_commands, parse_uri
from .transport import LineSocket

log = logging.getLogger(__name__)


class SessionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    PEER_CLOSED = "peer-closed"


class CogSimpleStorage:
    """Session with a CogServer at `cog://host[:port]/namespace`.

    Only `open()` is serialized. Callers must not overlap send/receive
    pairs, nor close the session while a send or receive is in flight.
    """

    def __init__(self, uri: str, shell: str = SHELL_SEXPR):
        handshake_commands(shell)  # reject unknown shells early
        self.uri = uri
        self.endpoint = parse_uri(uri)
        self.shell = shell
        self._lock = threading.Lock()
        self._state = SessionState.DISCONNECTED
        self._conn: Optional[LineSocket] = None

    def __repr__(self) -> str:
        return f"<CogSimpleStorage {self.uri} {self._state.value}>"

    def open(self) -> None:
        with self._lock:
            if self._state is SessionState.CONNECTED:
                return

            sock = open_socket(self.endpoint)
            tune_socket(sock)
            conn = LineSocket(sock)
            try:
                client_handshake(conn, self.shell)
            except Exception:
                sock.close()
                self._state = SessionState.DISCONNECTED
                raise

            self._conn = conn
            self._state = SessionState.CONNECTED
            log.debug("opened %s", self.uri)

    def connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.sock.close()
                log.debug("closed %s", self.uri)
            self._conn = None
            self._state = SessionState.DISCONNECTED

    def send(self, text: str) -> None:
        """Write `text` as-is; the caller supplies the trailing newline."""
        self._active().send_text(text)

    def receive(self, greeting: bool = False) -> str:
        conn = self._active()
        try:
            return conn.recv_frame(greeting)
        except PeerClosed:
            conn.sock.close()
            self._conn = None
            self._state = SessionState.PEER_CLOSED
            log.debug("peer closed %s", self.uri)
            raise

    def barrier(self) -> None:
        """Fence: every write issued before the barrier completes before
        any write issued after it.

        Nothing is queued here; each send() goes straight to the socket,
        so there is nothing to drain. A buffered implementation must flush
        its queue before returning.
        """

    def stats(self) -> str:
        return f"Connected to {self.uri}\nno stats yet\n"

    def _active(self) -> LineSocket:
        if self._state is not SessionState.CONNECTED or self._conn is None:
            raise NotConnected("Not connected to cogserver!")
        return self._conn
