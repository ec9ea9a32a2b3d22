import logging
import socket

import pytest

from cogsimple.errors import ConnectionError
from cogsimple.handshake import client_handshake, open_socket, tune_socket
from cogsimple.protocol import parse_uri
from cogsimple.transport import LineSocket


def free_port():
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_connect_refused_names_host():
    ep = parse_uri(f"cog://127.0.0.1:{free_port()}/x")
    with pytest.raises(ConnectionError) as ei:
        open_socket(ep)
    assert ei.value.host == "127.0.0.1"
    assert "127.0.0.1" in str(ei.value)


def test_unknown_host(monkeypatch):
    def fail(*args, **kwargs):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(socket, "getaddrinfo", fail)
    with pytest.raises(ConnectionError, match="Unknown host nowhere: Name or service not known"):
        open_socket(parse_uri("cog://nowhere/x"))


def test_tune_socket_sets_nodelay(cogserver):
    sock = open_socket(parse_uri("cog://%s:%d/x" % cogserver.address))
    with sock:
        tune_socket(sock)
        assert sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY) != 0


def test_sockopt_failure_is_only_logged(caplog):
    class NoOpts:
        def setsockopt(self, *args):
            raise OSError(95, "Operation not supported")

    with caplog.at_level(logging.WARNING, logger="cogsimple.handshake"):
        tune_socket(NoOpts())
    assert "TCP_NODELAY" in caplog.text
    assert "Operation not supported" in caplog.text


def test_sexpr_handshake(scripted):
    sock = scripted(b"\x16", b"opencog> ")
    client_handshake(LineSocket(sock))
    assert sock.sent == b"sexpr\n"
    assert sock.chunks == []


def test_scm_handshake(scripted):
    sock = scripted(b"guile> ", b"\n", b"#t\n")
    client_handshake(LineSocket(sock), "scm")
    assert sock.sent == (
        b"scm hush\n"
        b"(use-modules (opencog exec))\n"
        b"(cog-set-server-mode! #t)\n"
    )
    assert sock.chunks == []
