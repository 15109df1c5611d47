import socket

import pytest

from ircserver.client import Client
from ircserver.server import BUFFER_SIZE, MAX_CLIENTS, PORT, Server


@pytest.fixture
def server():
    srv = Server(port=0, host="127.0.0.1")
    yield srv
    srv.close()


def _connect(srv):
    peer = socket.create_connection(srv.address, timeout=5)
    peer.settimeout(5)
    return peer


def _recv_until(peer, terminator=b"\r\n"):
    data = b""
    while not data.endswith(terminator):
        chunk = peer.recv(BUFFER_SIZE)
        if not chunk:
            break
        data += chunk
    return data


def test_defaults_match_protocol(server):
    assert PORT == 6667
    assert BUFFER_SIZE == 1024
    assert len(server.clients) == MAX_CLIENTS == 10
    assert not any(c.is_connected() for c in server.clients)
    assert server.channels == {}


def test_listening_message(capsys):
    with Server(port=0, host="127.0.0.1") as srv:
        port = srv.address[1]
        out = capsys.readouterr().out
    assert port > 0
    assert f"Server listening on port {port}..." in out


def test_bind_failure_raises():
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind(("127.0.0.1", 0))
    blocker.listen(1)
    try:
        with pytest.raises(OSError):
            Server(port=blocker.getsockname()[1], host="127.0.0.1")
    finally:
        blocker.close()


def test_accept_assigns_first_free_slot(server, capsys):
    peer = _connect(server)
    try:
        index = server.accept_new_client()
        assert index == 0
        assert server.clients[0].is_connected()
        assert not server.clients[1].is_connected()
        assert "New connection: 127.0.0.1:" in capsys.readouterr().out
    finally:
        peer.close()


def test_nick_and_user_over_socket(server):
    peer = _connect(server)
    try:
        index = server.accept_new_client()
        peer.sendall(b"NICK alice\r\n")
        server.handle_client_data(index)
        assert server.clients[index].nickname == "alice"

        peer.sendall(b"USER al 0 * :Alice\r\n")
        server.handle_client_data(index)
        assert server.clients[index].username == "al"
        assert server.clients[index].registered
        assert _recv_until(peer) == b":irc 001 alice :Welcome to ft_irc, alice!\r\n"
    finally:
        peer.close()


def test_disconnect_frees_slot(server, capsys):
    peer = _connect(server)
    index = server.accept_new_client()
    server.clients[index].nickname = "gone"
    peer.close()
    server.handle_client_data(index)
    client = server.clients[index]
    assert not client.is_connected()
    assert client.nickname == ""
    assert "Client disconnected (fd" in capsys.readouterr().out


def test_remove_client_resets_slot(server):
    peer = _connect(server)
    try:
        index = server.accept_new_client()
        server.clients[index].nickname = "bob"
        server.clients[index].register_user()
        server.remove_client(index)
        client = server.clients[index]
        assert not client.is_connected()
        assert client.nickname == ""
        assert client.registered is False
        assert peer.recv(BUFFER_SIZE) == b""
    finally:
        peer.close()


def test_handle_input_updates_shared_channels(server):
    client = Client()
    assert server.handle_input(client, "NICK carol\r\n") is True
    assert client.nickname == "carol"
    server.handle_input(client, "JOIN #room\r\n")
    assert set(server.channels) == {"#room"}
    assert client in server.channels["#room"].members
    assert server.channels["#room"].is_operator(client)


def test_handle_input_unknown_command(server, capsys):
    assert server.handle_input(Client(), "FOO bar") is False
    assert "Unknown command: FOO" in capsys.readouterr().out


def test_poll_accepts_and_processes(server):
    peer = _connect(server)
    try:
        server._poll(timeout=5)
        assert server.clients[0].is_connected()
        peer.sendall(b"NICK dave\r\n")
        server._poll(timeout=5)
        assert server.clients[0].nickname == "dave"
    finally:
        peer.close()


def test_close_is_idempotent_and_stops_accepting(server):
    server.close()
    server.close()
    with pytest.raises(OSError):
        server.accept_new_client()
    with pytest.raises(OSError):
        server.address