"""
cogsimple.client
Demo client: open a session, run each command, print the replies.
"""
from __future__ import annotations

import argparse
import logging

from .protocol import HANDSHAKES, SHELL_SEXPR
from .storage import CogSimpleStorage


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--uri", default="cog://localhost/", help="cog://host[:port]/namespace")
    ap.add_argument("--shell", default=SHELL_SEXPR, choices=sorted(HANDSHAKES))
    ap.add_argument("--stats", action="store_true", help="print session stats before closing")
    ap.add_argument("--log-level", default="WARNING")
    ap.add_argument("command", nargs="*", default=["ping"])
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    store = CogSimpleStorage(args.uri, shell=args.shell)
    store.open()
    print(f"[client] connected to {store.endpoint.host}:{store.endpoint.port}")
    try:
        for cmd in args.command:
            if not cmd.endswith("\n"):
                cmd += "\n"
            store.send(cmd)
            print(store.receive(), end="")
        store.barrier()
        if args.stats:
            print(store.stats(), end="")
    finally:
        store.close()


if __name__ == "__main__":
    main()
