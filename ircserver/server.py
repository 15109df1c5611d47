"""The listening socket, the client slots and the select-driven main loop."""

from __future__ import annotations

import argparse
import select
import socket
import sys
from collections.abc import Sequence

from ircserver.channel import Channel
from ircserver.client import Client
from ircserver.commands import CommandHandler

MAX_CLIENTS = 10
BUFFER_SIZE = 1024
PORT = 6667
_BACKLOG = 5


class Server:
    """An IRC server with a fixed number of client slots.

    The socket is bound and listening as soon as the server is constructed.
    """

    def __init__(self, port: int = PORT, host: str = "") -> None:
        self.host = host
        self.port = port
        self.clients: list[Client] = [Client() for _ in range(MAX_CLIENTS)]
        self.channels: dict[str, Channel] = {}
        self._handler = CommandHandler(self.clients, self.channels)
        self._sock: socket.socket | None = None
        self.init_socket()

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def address(self) -> tuple[str, int]:
        """The address the server is actually bound to."""
        if self._sock is None:
            raise OSError("server socket is closed")
        host, port = self._sock.getsockname()[:2]
        return host, port

    def init_socket(self) -> None:
        """Create, bind and listen on the server socket.

        Raises OSError if any of these steps fails.
        """
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
            sock.listen(_BACKLOG)
        except OSError:
            sock.close()
            raise
        self._sock = sock
        print(f"Server listening on port {self.address[1]}...")

    def run(self) -> None:
        """Serve clients forever."""
        while True:
            self._poll()

    def _poll(self, timeout: float | None = None) -> None:
        """Wait for activity once and handle whatever became readable."""
        if self._sock is None:
            raise OSError("server socket is closed")
        watched: list[socket.socket] = [self._sock]
        watched.extend(c.sock for c in self.clients if c.is_connected() and c.sock)
        try:
            readable, _, _ = select.select(watched, [], [], timeout)
        except (OSError, ValueError) as exc:
            print(f"select: {exc}", file=sys.stderr)
            return

        if self._sock in readable:
            self.accept_new_client()

        for index, client in enumerate(self.clients):
            if client.is_connected() and client.sock in readable:
                self.handle_client_data(index)

    def accept_new_client(self) -> int | None:
        """Accept a pending connection and give it a free slot.

        Returns the slot index, or None when the connection could not be
        accepted or the server is full.
        """
        if self._sock is None:
            raise OSError("server socket is closed")
        try:
            conn, addr = self._sock.accept()
        except OSError as exc:
            print(f"accept: {exc}", file=sys.stderr)
            return None

        print(f"New connection: {addr[0]}:{addr[1]}")

        for index, client in enumerate(self.clients):
            if not client.is_connected():
                client.sock = conn
                return index

        try:
            conn.sendall(b"Server full\r\n")
        except OSError:
            pass
        conn.close()
        return None

    def handle_client_data(self, index: int) -> None:
        """Read from the client in slot ``index`` and execute what it sent."""
        client = self.clients[index]
        fd = client.fd
        try:
            data = client.sock.recv(BUFFER_SIZE - 1) if client.sock else b""
        except OSError:
            data = b""
        if not data:
            print(f"Client disconnected (fd {fd})")
            self.remove_client(index)
            return
        text = data.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        self.handle_input(client, text)

    def remove_client(self, index: int) -> None:
        """Close the connection in slot ``index`` and free the slot."""
        self.clients[index].clear()

    def handle_input(self, client: Client, data: str) -> bool:
        """Execute the command in ``data`` for ``client``.

        Returns False when the command is not known.
        """
        return self._handler.dispatch(client, data)

    def close(self) -> None:
        """Close every client connection and the listening socket."""
        for client in self.clients:
            if client.sock is not None:
                client.clear()
        if self._sock is not None:
            self._sock.close()
            self._sock = None


def main(argv: Sequence[str] | None = None) -> int:
    """Start the server on the standard IRC port and serve until interrupted."""
    parser = argparse.ArgumentParser(
        prog="ircserver",
        description=f"Minimal IRC server listening on port {PORT}.",
    )
    parser.parse_args(argv)

    try:
        server = Server()
    except OSError as exc:
        print(f"ircserver: {exc}", file=sys.stderr)
        return 1

    with server:
        try:
            server.run()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())