"""
cogsimple.server
Stub CogServer: answers the shell handshake with an unterminated prompt,
`ping` with `pong`, and echoes every other line.
"""
from __future__ import annotations

import argparse
import logging
import socket
import threading
from typing import List, Optional

from .protocol import DEFAULT_PORT, HANDSHAKES, NEWLINE

log = logging.getLogger(__name__)

DEFAULT_PROMPT = "opencog> "


class StubServer:
    def __init__(self, host: str = "127.0.0.1", port: int = 0, prompt: str = DEFAULT_PROMPT):
        self.prompt = prompt
        self.commands: List[str] = []
        self.handshakes = 0
        self._lock = threading.Lock()
        self._srv = socket.create_server((host, port))
        self._conns: List[socket.socket] = []
        self._thread: Optional[threading.Thread] = None

    @property
    def address(self):
        return self._srv.getsockname()[:2]

    def start(self) -> "StubServer":
        self._thread = threading.Thread(target=self.serve_forever, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        with self._lock:
            conns, self._conns = self._conns, []
        for sock in [self._srv] + conns:
            # shutdown() wakes threads blocked in accept/recv, close() alone does not
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            sock.close()
        if self._thread is not None:
            self._thread.join(1)

    def serve_forever(self) -> None:
        while True:
            try:
                conn, addr = self._srv.accept()
            except OSError:
                return
            log.debug("accepted from %s", addr)
            with self._lock:
                self._conns.append(conn)
            threading.Thread(target=self.handle, args=(conn,), daemon=True).start()

    def handle(self, conn: socket.socket) -> None:
        buf = b""
        with conn:
            while True:
                try:
                    chunk = conn.recv(4096)
                except OSError:
                    return
                if not chunk:
                    return
                buf += chunk
                while NEWLINE in buf:
                    line, buf = buf.split(NEWLINE, 1)
                    reply = self.reply(line.decode("utf-8"))
                    if reply is None:
                        return
                    try:
                        conn.sendall(reply.encode("utf-8"))
                    except OSError:
                        return

    def reply(self, line: str) -> Optional[str]:
        """Answer one command; None means hang up."""
        with self._lock:
            self.commands.append(line)
            if line + "\n" in (h for h, _ in HANDSHAKES.values()):
                self.handshakes += 1
                return self.prompt
        if line == "quit":
            return None
        if line == "ping":
            return "pong\n"
        return line + "\n"


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=int(DEFAULT_PORT))
    ap.add_argument("--prompt", default=DEFAULT_PROMPT, help="prompt sent after the shell command")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    srv = StubServer(args.host, args.port, args.prompt)
    print(f"[server] listening on {args.host}:{args.port}")
    try:
        srv.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        srv.stop()


if __name__ == "__main__":
    main()
