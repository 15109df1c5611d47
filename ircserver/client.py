"""A connected IRC client and its registration state."""

from __future__ import annotations

import socket
from dataclasses import dataclass


@dataclass(eq=False)
class Client:
    """One connection slot: the socket plus the identity the peer announced.

    Clients compare and hash by identity, so they can be kept in sets.
    """

    sock: socket.socket | None = None
    nickname: str = ""
    username: str = ""
    registered: bool = False

    @property
    def fd(self) -> int:
        """File descriptor of the socket, or 0 when the slot is free."""
        if self.sock is None:
            return 0
        fileno = self.sock.fileno()
        return fileno if fileno > 0 else 0

    def is_connected(self) -> bool:
        """Whether this slot currently holds an open connection."""
        return self.fd > 0

    def register_user(self) -> None:
        """Mark the client as registered."""
        self.registered = True

    def clear(self) -> None:
        """Close the connection and reset the slot to its empty state."""
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError:
                pass
        self.sock = None
        self.nickname = ""
        self.username = ""
        self.registered = False

    def send_message(self, msg: str) -> None:
        """Send ``msg`` to the peer; delivery failures are ignored."""
        if self.sock is None:
            return
        try:
            self.sock.sendall(msg.encode("utf-8"))
        except OSError:
            pass