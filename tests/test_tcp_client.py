import socket
import time

import pytest

from emodbuskit.ip_address import IPAddress
from emodbuskit.tcp_client import TCPClient, hostname_to_ip


@pytest.fixture
def listener():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    yield server, server.getsockname()[1]
    server.close()


def _wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def _recv_exact(conn, size):
    data = b""
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


def test_connect_sets_host_and_port(listener):
    server, port = listener
    client = TCPClient(IPAddress("127.0.0.1"), port)
    conn, _ = server.accept()
    try:
        assert client.connected() is True
        assert bool(client) is True
        assert client.host == "127.0.0.1"
        assert client.port == port
    finally:
        client.stop()
        conn.close()


def test_connect_by_name_string(listener):
    server, port = listener
    client = TCPClient()
    client.connect("127.0.0.1", port)
    conn, _ = server.accept()
    try:
        assert client.host == IPAddress("127.0.0.1")
    finally:
        client.stop()
        conn.close()


def test_write_block_and_single_byte(listener):
    server, port = listener
    client = TCPClient(IPAddress("127.0.0.1"), port)
    conn, _ = server.accept()
    try:
        assert client.write(b"abc") == 3
        assert client.write(0x41) == 1
        assert _recv_exact(conn, 4) == b"abcA"
    finally:
        client.stop()
        conn.close()


def test_available_peek_and_read(listener):
    server, port = listener
    client = TCPClient(IPAddress("127.0.0.1"), port)
    conn, _ = server.accept()
    try:
        conn.sendall(b"\x01\x02\x03")
        assert _wait_for(lambda: client.available() == 3)
        assert client.peek() == 1
        assert client.available() == 3
        assert client.read_byte() == 1
        assert client.read(2) == b"\x02\x03"
        assert client.available() == 0
        assert client.peek() == -1
    finally:
        client.stop()
        conn.close()


def test_peer_close_is_detected(listener):
    server, port = listener
    client = TCPClient(IPAddress("127.0.0.1"), port)
    conn, _ = server.accept()
    conn.close()
    assert _wait_for(lambda: not client.connected())
    assert client.read(10) == b""
    assert client.read_byte() == -1
    client.stop()


def test_disconnect_resets_state(listener):
    server, port = listener
    client = TCPClient(IPAddress("127.0.0.1"), port)
    conn, _ = server.accept()
    try:
        assert client.disconnect() is True
        assert client.connected() is False
        assert client.host.is_nil()
        assert client.port == 0
    finally:
        conn.close()


def test_context_manager_stops(listener):
    server, port = listener
    with TCPClient(IPAddress("127.0.0.1"), port) as client:
        conn, _ = server.accept()
        client.set_no_delay(True)
        assert client.connected() is True
    conn.close()
    assert client.connected() is False
    assert client.host.is_nil()


def test_unconnected_client():
    client = TCPClient()
    assert client.connected() is False
    assert bool(client) is False
    assert client.available() == 0
    assert client.peek() == -1
    with pytest.raises(ConnectionError):
        client.write(b"x")
    with pytest.raises(ConnectionError):
        client.read(1)


def test_connect_refused():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    client = TCPClient()
    with pytest.raises(OSError):
        client.connect(IPAddress("127.0.0.1"), port)
    assert client.connected() is False


def test_hostname_to_ip_numeric():
    assert hostname_to_ip("127.0.0.1") == "127.0.0.1"


def test_hostname_to_ip_failure(monkeypatch):
    def fail(*args, **kwargs):
        raise socket.gaierror("no such name")

    monkeypatch.setattr(socket, "getaddrinfo", fail)
    assert hostname_to_ip("host.invalid").is_nil()
    client = TCPClient()
    with pytest.raises(ConnectionError):
        client.connect("host.invalid", 502)