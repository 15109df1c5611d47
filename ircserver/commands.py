"""Handlers for the IRC commands the server understands."""

from __future__ import annotations

import re
from collections.abc import Callable, MutableMapping, Sequence

from ircserver.channel import Channel
from ircserver.client import Client

_WORD = re.compile(r"[ \t\n\r\v\f]*([^ \t\n\r\v\f]*)")


class _Args:
    """Reads whitespace-separated words and whole lines from command text."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def word(self) -> str:
        """Next word, skipping leading whitespace; empty when none is left."""
        match = _WORD.match(self._text, self._pos)
        self._pos = match.end()
        return match.group(1)

    def line(self) -> str:
        """The rest of the current line, without its newline."""
        end = self._text.find("\n", self._pos)
        if end == -1:
            result = self._text[self._pos:]
            self._pos = len(self._text)
        else:
            result = self._text[self._pos:end]
            self._pos = end + 1
        return result

    def rest(self) -> str:
        """Everything not read yet."""
        return self._text[self._pos:]


def _trailing_text(text: str) -> str:
    """Strip leading spaces and then one leading ':' from a trailing argument."""
    text = text.lstrip(" ")
    if text.startswith(":"):
        text = text[1:]
    return text


class CommandHandler:
    """Executes commands on behalf of clients against shared server state."""

    def __init__(
        self,
        clients: Sequence[Client],
        channels: MutableMapping[str, Channel],
    ) -> None:
        self.clients = clients
        self.channels = channels

    def _handlers(self) -> dict[str, Callable[[Client, str], None]]:
        return {
            "NICK": self.handle_nick,
            "USER": self.handle_user,
            "PRIVMSG": self.handle_privmsg,
            "JOIN": self.handle_join,
            "QUIT": self.handle_quit,
            "MODE": self.handle_mode,
            "KICK": self.handle_kick,
            "INVITE": self.handle_invite,
        }

    def find_client_by_nick(self, nick: str) -> Client | None:
        """Return the connected client using ``nick``, if any."""
        return next(
            (c for c in self.clients if c.is_connected() and c.nickname == nick),
            None,
        )

    def dispatch(self, client: Client, line: str) -> bool:
        """Run the command in ``line`` for ``client``.

        Returns False (after reporting it) when the command is unknown.
        """
        reader = _Args(line)
        command = reader.word()
        handler = self._handlers().get(command)
        if handler is None:
            print(f"Unknown command: {command}")
            return False
        handler(client, reader.rest())
        return True

    def handle_nick(self, client: Client, args: str) -> None:
        client.nickname = _Args(args).word()

    def handle_user(self, client: Client, args: str) -> None:
        reader = _Args(args)
        user = reader.word()
        reader.word()
        reader.word()
        reader.line()
        client.username = user
        client.register_user()
        client.send_message(
            f":irc 001 {client.nickname} :Welcome to ft_irc, {client.nickname}!\r\n"
        )

    def handle_privmsg(self, client: Client, args: str) -> None:
        reader = _Args(args)
        target = reader.word()
        msg = _trailing_text(reader.line())
        full_msg = f":{client.nickname} PRIVMSG {target} :{msg}\r\n"

        if target.startswith("#"):
            channel = self.channels.get(target)
            if channel is None:
                client.send_message(
                    f"403 {client.nickname} {target} :No such channel\r\n"
                )
                return
            if client not in channel.members:
                client.send_message(
                    f"404 {client.nickname} {target} "
                    ":Cannot send to channel (not a member)\r\n"
                )
                return
            for member in list(channel.members):
                if member.fd != client.fd:
                    member.send_message(full_msg)
        else:
            recipient = self.find_client_by_nick(target)
            if recipient is not None:
                recipient.send_message(full_msg)

    def handle_join(self, client: Client, args: str) -> None:
        chan_name = _Args(args).word()
        if not chan_name:
            client.send_message(":irc 461 JOIN :Not enough parameters\r\n")
            return

        is_new = chan_name not in self.channels
        if is_new:
            channel = Channel(chan_name)
            channel.add_member(client)
            channel.add_operator(client)
            self.channels[chan_name] = channel
        channel = self.channels[chan_name]

        if not is_new:
            if channel.has_mode("i") and not channel.is_invited(client):
                client.send_message(
                    f":irc 473 {client.nickname} {chan_name} "
                    ":Cannot join channel (+i)\r\n"
                )
                return
            if client in channel.members:
                client.send_message(
                    f":irc 443 {client.nickname} {chan_name} "
                    ":is already on channel\r\n"
                )
                return

        channel.add_member(client)
        channel.remove_invited(client)
        channel.broadcast(f":{client.nickname} JOIN {chan_name}\r\n")

    def handle_quit(self, client: Client, args: str) -> None:
        client.send_message("Goodbye!\r\n")
        client.clear()

    def handle_mode(self, client: Client, args: str) -> None:
        reader = _Args(args)
        target = reader.word()
        mode = reader.word()
        nick = reader.word()

        if not target.startswith("#"):
            client.send_message(f":irc 403 {target} :Not a channel\r\n")
            return

        channel = self.channels.setdefault(target, Channel(target))
        if not channel.is_operator(client):
            client.send_message(
                f":irc 482 {target} :You're not a channel operator\r\n"
            )
            return

        if mode == "+o":
            promoted = next((c for c in self.clients if c.nickname == nick), None)
            if promoted is None:
                client.send_message(f":irc 401 {nick} :No such nick\r\n")
                return
            channel.add_operator(promoted)
            channel.broadcast(f":{client.nickname} MODE {target} +o {nick}\r\n")
        elif mode == "+i":
            channel.add_mode("i")
            channel.broadcast(f":{client.nickname} MODE {target} +i\r\n")

    def handle_kick(self, client: Client, args: str) -> None:
        reader = _Args(args)
        channel_name = reader.word()
        target_nick = reader.word()
        if not channel_name or not target_nick:
            client.send_message(
                f":irc 461 {client.nickname} KICK :Not enough parameters\r\n"
            )
            return
        reason = _trailing_text(reader.line())

        channel = self.channels.get(channel_name)
        if channel is None:
            client.send_message(
                f":irc 403 {client.nickname} {channel_name} :No such channel\r\n"
            )
            return

        if not channel.is_operator(client):
            client.send_message(
                f":irc 482 {client.nickname} {channel_name} "
                ":You're not a channel operator\r\n"
            )
            return

        target = next(
            (
                c
                for c in self.clients
                if c.is_connected()
                and c.nickname == target_nick
                and c in channel.members
            ),
            None,
        )
        if target is None:
            client.send_message(
                f":irc 441 {client.nickname} {target_nick} {channel_name} "
                ":They aren't on that channel\r\n"
            )
            return

        kick_msg = f":{client.nickname} KICK {channel_name} {target_nick}"
        if reason:
            kick_msg += f" :{reason}"
        channel.broadcast(kick_msg + "\r\n")
        channel.remove_member(target)
        channel.remove_operator(target)
        target.send_message(
            f":{client.nickname} KICK {channel_name} :{reason or 'Kicked'}\r\n"
        )

    def handle_invite(self, inviter: Client, args: str) -> None:
        reader = _Args(args)
        target_nick = reader.word()
        channel_name = reader.word()

        channel = self.channels.setdefault(channel_name, Channel(channel_name))
        if not channel.is_operator(inviter):
            inviter.send_message(
                f":irc 482 {channel_name} :You're not a channel operator\r\n"
            )
            return

        target = self.find_client_by_nick(target_nick)
        if target is None:
            inviter.send_message(f":irc 401 {target_nick} :No such nick\r\n")
            return

        channel.add_invited(target)
        target.send_message(
            f":{inviter.nickname} INVITE {target_nick} {channel_name}\r\n"
        )
        inviter.send_message(
            f":irc 341 {inviter.nickname} {target_nick} {channel_name}\r\n"
        )