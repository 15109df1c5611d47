"""IRC channels: members, operators, invitations and modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class Channel:
    """A named channel holding sets of clients and a string of mode letters."""

    name: str = "default"
    members: set[Any] = field(default_factory=set)
    operators: set[Any] = field(default_factory=set)
    invited: set[Any] = field(default_factory=set)
    invite_only: bool = False
    modes: str = ""

    def add_member(self, client: Any) -> None:
        self.members.add(client)

    def remove_member(self, client: Any) -> None:
        self.members.discard(client)

    def add_operator(self, client: Any) -> None:
        self.operators.add(client)

    def remove_operator(self, client: Any) -> None:
        self.operators.discard(client)

    def is_operator(self, client: Any) -> bool:
        return client in self.operators

    def broadcast(self, msg: str) -> None:
        """Send ``msg`` to every member of the channel."""
        for member in list(self.members):
            member.send_message(msg)

    def add_invited(self, client: Any) -> None:
        self.invited.add(client)

    def is_invited(self, client: Any) -> bool:
        return client in self.invited

    def remove_invited(self, client: Any) -> None:
        self.invited.discard(client)

    def is_invite_only(self) -> bool:
        return self.invite_only

    def add_mode(self, mode: str) -> None:
        """Add a mode letter unless it is already set."""
        if mode not in self.modes:
            self.modes += mode

    def remove_mode(self, mode: str) -> None:
        """Remove a mode letter if it is set."""
        self.modes = self.modes.replace(mode, "", 1)

    def has_mode(self, mode: str) -> bool:
        return mode in self.modes