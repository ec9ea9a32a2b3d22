"""
cogsimple.handshake
Connect to a CogServer, tune the socket for latency and enter the shell.
"""
from __future__ import annotations

import logging
import socket

from .errors import ConnectionError
from .protocol import Endpoint, SHELL_SEXPR, handshake_commands
from .transport import LineSocket

log = logging.getLogger(__name__)


def open_socket(endpoint: Endpoint) -> socket.socket:
    host = endpoint.host
    try:
        infos = socket.getaddrinfo(host, endpoint.port, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except socket.gaierror as e:
        raise ConnectionError(f"Unknown host {host}: {e.strerror or e}", host=host) from e

    # Try each resolved address in turn, IPv4 or IPv6; report the last failure.
    err = None
    for family, socktype, proto, _, addr in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as e:
            err = ConnectionError(
                f"Unable to create socket to host {host}: {e.strerror or e}", host=host)
            err.__cause__ = e
            continue

        try:
            sock.connect(addr)
        except OSError as e:
            sock.close()
            err = ConnectionError(
                f"Unable to connect to host {host}: {e.strerror or e}", host=host)
            err.__cause__ = e
            continue

        log.debug("connected to %s port %s (%s)", host, endpoint.port, addr[0])
        return sock

    if err is None:
        err = ConnectionError(f"Unknown host {host}: no addresses", host=host)
    raise err


def tune_socket(sock: socket.socket) -> None:
    """We send oceans of tiny packets and want the fastest replies."""
    options = [("TCP_NODELAY", socket.TCP_NODELAY)]
    quickack = getattr(socket, "TCP_QUICKACK", None)  # Linux only
    if quickack is not None:
        options.append(("TCP_QUICKACK", quickack))

    for name, opt in options:
        try:
            sock.setsockopt(socket.IPPROTO_TCP, opt, 1)
        except OSError as e:
            log.warning("Error setting sockopt %s: %s", name, e)


def client_handshake(ls: LineSocket, shell: str = SHELL_SEXPR) -> None:
    """Switch the server into the requested shell and drain its prompt."""
    command, followups = handshake_commands(shell)
    ls.send_text(command)
    ls.recv_frame(greeting=True)

    for cmd in followups:
        ls.send_text(cmd)
        ls.recv_frame()
    log.debug("entered %s shell", shell)
