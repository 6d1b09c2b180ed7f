"""Listening socket, accept loop and command-line entry point."""

from __future__ import annotations

import argparse
import logging
import selectors
import socket
import sys
import threading
from typing import Sequence

from .registry import MAX_PENDING_CONNECTIONS, PORT, ClientRegistry
from .session import ClientSession, format_peer

log = logging.getLogger(__name__)

_POLL_INTERVAL = 0.2


def create_server_socket(
    host: str = "", port: int = PORT, backlog: int = MAX_PENDING_CONNECTIONS
) -> socket.socket:
    """Create a reusable IPv4 TCP socket bound to host:port and listening."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except BaseException:
        sock.close()
        raise
    log.info("Server is listening on port %d", sock.getsockname()[1])
    return sock


class ChatServer:
    """Accepts clients and runs each session on its own thread."""

    def __init__(
        self,
        host: str = "",
        port: int = PORT,
        backlog: int = MAX_PENDING_CONNECTIONS,
        registry: ClientRegistry | None = None,
    ) -> None:
        self.registry = registry if registry is not None else ClientRegistry()
        self._sock = create_server_socket(host, port, backlog)
        self._stopped = threading.Event()

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._sock.getsockname()[:2]
        return host, port

    def __enter__(self) -> ChatServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def serve_forever(self) -> None:
        """Accept connections until shutdown() is called."""
        log.info("Waiting for incoming connections...")
        with selectors.DefaultSelector() as selector:
            selector.register(self._sock, selectors.EVENT_READ)
            while not self._stopped.is_set():
                try:
                    if not selector.select(_POLL_INTERVAL):
                        continue
                    conn, peer = self._sock.accept()
                except (OSError, ValueError) as exc:
                    if self._stopped.is_set():
                        break
                    log.warning("accept failed: %s", exc)
                    continue
                log.info("Client connected from %s", format_peer(peer))
                thread = threading.Thread(target=self._handle, args=(conn,), daemon=True)
                try:
                    thread.start()
                except RuntimeError as exc:
                    log.warning("Failed to create client thread: %s", exc)
                    conn.close()

    def _handle(self, conn: socket.socket) -> None:
        log.info("Client thread started for fd %d", conn.fileno())
        with conn:
            ClientSession(conn, self.registry).run()
        log.info("Client thread finished")

    def shutdown(self) -> None:
        """Stop accepting connections and close the listening socket."""
        self._stopped.set()
        self._sock.close()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="minircd", description="A small chat server.")
    parser.add_argument("--host", default="", help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    parser.add_argument(
        "--backlog", type=int, default=MAX_PENDING_CONNECTIONS, help="pending connection queue"
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        server = ChatServer(args.host, args.port, args.backlog)
    except (OSError, OverflowError) as exc:
        print(f"Failed to start server: {exc}", file=sys.stderr)
        return 1
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        log.info("Shutting down server.")
        server.shutdown()
    return 0