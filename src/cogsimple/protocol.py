"""
cogsimple.protocol
CogServer line protocol constants and `cog://` URI parsing.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidURI

SCHEME = "cog"
URI_PREFIX = SCHEME + "://"
DEFAULT_PORT = "17001"

# Shell commands
SHELL_SEXPR = "sexpr"
SHELL_SCM = "scm"
HANDSHAKES = {
    SHELL_SEXPR: ("sexpr\n", ()),
    # Silent scheme prompt, then put the server into server mode.
    SHELL_SCM: ("scm hush\n", (
        "(use-modules (opencog exec))\n",
        "(cog-set-server-mode! #t)\n",
    )),
}

# Framing
CHUNK_SIZE = 4096
IDLE_BYTE = b"\x16"  # SYN, sent by a congested server probing for half-open sockets
NEWLINE = b"\n"


@dataclass(frozen=True)
class Endpoint:
    scheme: str
    host: str
    port: str
    namespace: str

    @property
    def uri(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}/{self.namespace}"


def parse_uri(uri: str) -> Endpoint:
    """Split `cog://host[:port]/namespace` into an Endpoint.

    The namespace is passed through untouched; a missing or empty port
    falls back to DEFAULT_PORT.
    """
    if not uri.startswith(URI_PREFIX):
        raise InvalidURI(f"Unknown URI '{uri}'")

    rest = uri[len(URI_PREFIX):]
    end = len(rest)
    for sep in ":/":
        i = rest.find(sep)
        if i != -1 and i < end:
            end = i
    host = rest[:end]
    rest = rest[end:]

    port = DEFAULT_PORT
    if rest.startswith(":"):
        port, _, namespace = rest[1:].partition("/")
        port = port or DEFAULT_PORT
    else:
        namespace = rest[1:]

    return Endpoint(scheme=SCHEME, host=host, port=port, namespace=namespace)


def handshake_commands(shell: str) -> Tuple[str, Tuple[str, ...]]:
    try:
        return HANDSHAKES[shell]
    except KeyError:
        raise ValueError(f"unsupported shell {shell!r}") from None
