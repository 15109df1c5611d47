# ircserver

A small IRC server that runs in a single process. It listens on TCP
port 6667 on all interfaces and has 10 client slots. When every slot is
taken, a new connection is sent `Server full` and closed.

## Running

```
pip install .
ircserver
```

Once the socket is listening, the server prints
`Server listening on port 6667...`. It then serves until you interrupt it
with Ctrl-C. If the port cannot be bound, it prints the error and exits
with status 1. The `ircserver` command takes no options apart from `--help`.

You can connect with an IRC client or with a plain `nc localhost 6667`.

## Commands

| Command | Effect |
|---|---|
| `NICK <nick>` | Sets your nickname. |
| `USER <user> <a> <b> :<real>` | Stores the user name and marks you registered. The server answers `:irc 001 <nick> :Welcome to ft_irc, <nick>!`. |
| `JOIN <channel>` | Joins the channel, and every member sees the `JOIN`. If the channel does not exist yet, it is created and you become its operator. A pending invitation is used up when you join. |
| `PRIVMSG <target> :<text>` | If the target starts with `#`, the message goes to the other members of that channel, and only when you are a member yourself. Otherwise it goes to the connected user with that nickname. |
| `MODE <#channel> +o <nick>` | Operators only. Makes another user an operator and tells the channel. |
| `MODE <#channel> +i` | Operators only. Makes the channel invite-only. |
| `INVITE <nick> <channel>` | Operators only. Invites a user. The invited user gets an `INVITE` line and you get `341`. |
| `KICK <channel> <nick> [:reason]` | Operators only. Tells the channel, removes the member and takes away their operator status. The kicked user also gets a direct notice, with the reason `Kicked` when none was given. |
| `QUIT` | Sends `Goodbye!` and closes your connection. |

Errors are reported with numeric replies:

- `401`: no such nick
- `403`: no such channel, or a `MODE` target that does not start with `#`
- `404`: cannot send to a channel you are not a member of
- `441`: they aren't on that channel
- `443`: already on channel
- `461`: not enough parameters (`JOIN`, `KICK`)
- `473`: cannot join an invite-only channel without an invitation
- `482`: not a channel operator

The server prints unknown commands on its own standard output and sends
nothing back to the client.

## Limits

This is a deliberately small server. It does not:

- ask for a connection password or check that registration has happened
  before other commands are used;
- reject a nickname that is already in use;
- support `PART`, `TOPIC`, `PING`/`PONG`, channel keys, user limits or
  removing modes (`-i`, `-o`);
- split input into lines. Each read from a socket, of at most 1023 bytes,
  is taken as a single command.

## Using it from Python

```python
from ircserver.server import Server

with Server(port=6667) as server:
    print(server.address)
    server.run()
```

`Server(port=6667, host="")` binds and listens as soon as it is
constructed and raises `OSError` if that fails. Leaving the `with` block,
or calling `close()`, closes every client connection and the listening
socket. `handle_input(client, data)` runs one command for a client and
returns `False` when the command is unknown.

The building blocks are:

- `ircserver.client.Client`: one connection slot, holding the socket,
  nickname, user name and registration flag.
- `ircserver.channel.Channel`: a named channel with sets of members,
  operators and invited clients, and a string of mode letters.
- `ircserver.commands.CommandHandler`: runs commands against a sequence of
  clients and a mapping of channel names to channels.
  `dispatch(client, line)` runs a single command line and returns `False`
  for an unknown command.

## Tests

```
pip install .[test]
pytest
```