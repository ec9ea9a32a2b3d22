"""
cogsimple.transport
Newline framing over a connected TCP socket.
"""
from __future__ import annotations

import socket

from .errors import PeerClosed, TransportError
from .protocol import CHUNK_SIZE, IDLE_BYTE, NEWLINE


class LineSocket:
    def __init__(self, sock: socket.socket):
        self.sock = sock

    def send_text(self, text: str) -> None:
        try:
            self.sock.sendall(text.encode("utf-8"))
        except OSError as e:
            raise TransportError(f"Unable to talk to cogserver: {e}") from e

    def recv_frame(self, greeting: bool = False) -> str:
        """Read one newline-terminated message.

        Every message ends in a newline, except the prompt the server sends
        right after connecting. With `greeting` set, a short first read is
        returned as-is even without the newline.
        """
        buf = bytearray()
        first = True
        while True:
            try:
                chunk = self.sock.recv(CHUNK_SIZE)
            except OSError as e:
                raise TransportError(f"Unable to talk to cogserver: {e}") from e

            if not chunk:
                raise PeerClosed("Cogserver unexpectedly closed connection")

            if chunk == IDLE_BYTE:
                continue

            done = chunk.endswith(NEWLINE)
            if first and len(chunk) < CHUNK_SIZE and (done or greeting):
                return chunk.decode("utf-8", errors="replace")

            first = False
            buf += chunk
            if done:
                return buf.decode("utf-8", errors="replace")
