"""A small blocking TCP client with peek-based connection checks."""

from __future__ import annotations

import socket
import time

from .ip_address import IPAddress
from .logging_util import LogLevel, log

_DRAIN_SECONDS = 2.0
_PEEK_SIZE = 256


def hostname_to_ip(hostname: str) -> IPAddress:
    """Resolve ``hostname`` to its first IPv4 address; 0.0.0.0 if none is found."""
    log(LogLevel.DEBUG, f"Looking for '{hostname}'\n")
    try:
        infos = socket.getaddrinfo(hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        log(LogLevel.ERROR, f"getaddrinfo: {exc}\n")
        return IPAddress()
    for family, _type, _proto, _name, sockaddr in infos:
        if family == socket.AF_INET:
            address = IPAddress(sockaddr[0])
            if not address.is_nil():
                log(LogLevel.DEBUG, f"Host '{hostname}'={address}\n")
                return address
    log(LogLevel.DEBUG, f"No IP for '{hostname}' found\n")
    return IPAddress()


class TCPClient:
    """A TCP connection to one host, with byte-level read and write helpers."""

    def __init__(self, host: IPAddress | str | None = None, port: int = 0) -> None:
        self._sock: socket.socket | None = None
        self.host = IPAddress()
        self.port = 0
        if host is not None:
            self.connect(host, port)

    def connect(self, host: IPAddress | str, port: int) -> None:
        """Connect to ``host`` (an address or a host name) on ``port``.

        An existing connection is closed first. Raises OSError on failure.
        """
        if isinstance(host, IPAddress):
            address = IPAddress(host)
        else:
            address = hostname_to_ip(host)
            if address.is_nil():
                log(LogLevel.ERROR, f"No such host '{host}'\n")
                raise ConnectionError(f"no such host {host!r}")
        if self.connected():
            self.disconnect()
        elif self._sock is not None:
            self._close_socket()
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.connect((str(address), port))
        except OSError as exc:
            sock.close()
            log(LogLevel.ERROR, f"Error connecting to {address}:{port} - {exc}\n")
            raise
        self._sock = sock
        self.host = address
        self.port = port
        log(LogLevel.DEBUG, "Connected.\n")

    def _close_socket(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def disconnect(self) -> bool:
        """Drain pending input for at most two seconds, then close the connection."""
        if self._sock is not None:
            sock = self._sock
            previous = sock.gettimeout()
            deadline = time.monotonic() + _DRAIN_SECONDS
            try:
                sock.setblocking(False)
                while time.monotonic() < deadline:
                    chunk = sock.recv(_PEEK_SIZE)
                    if not chunk:
                        break
                    log(LogLevel.DEBUG, f"Drained {len(chunk)} bytes\n")
            except OSError:
                pass
            finally:
                try:
                    sock.settimeout(previous)
                except OSError:
                    pass
            self._close_socket()
        self.host = IPAddress()
        self.port = 0
        return True

    def _require(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("client is not connected")
        return self._sock

    def _peek(self, size: int) -> bytes:
        sock = self._require()
        previous = sock.gettimeout()
        sock.setblocking(False)
        try:
            return sock.recv(size, socket.MSG_PEEK)
        finally:
            sock.settimeout(previous)

    def write(self, data: bytes | bytearray | int) -> int:
        """Send one byte (given as int) or a block of bytes; return the count sent."""
        sock = self._require()
        payload = bytes([data & 0xFF]) if isinstance(data, int) else bytes(data)
        flags = getattr(socket, "MSG_NOSIGNAL", 0)
        try:
            sent = sock.send(payload, flags)
        except OSError as exc:
            log(LogLevel.ERROR, f"Error sending: {exc}\n")
            raise
        log(LogLevel.DEBUG, f"send buffer[{len(payload)}] -> {sent}\n")
        return sent

    def available(self) -> int:
        """Number of bytes waiting to be read (at most 256)."""
        if self._sock is None:
            return 0
        try:
            return len(self._peek(_PEEK_SIZE))
        except OSError:
            return 0

    def read_byte(self) -> int:
        """Read one byte; -1 when the peer has closed the connection."""
        data = self._require().recv(1)
        return data[0] if data else -1

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; empty when the peer has closed the connection."""
        return self._require().recv(size)

    def peek(self) -> int:
        """Look at the next byte without consuming it; -1 if none is waiting."""
        if self._sock is None:
            return -1
        try:
            data = self._peek(1)
        except OSError:
            return -1
        return data[0] if data else -1

    def flush(self) -> None:
        """Push out any data still held back by the Nagle algorithm.

        Switching TCP_NODELAY on makes the stack send pending segments at
        once; the previous setting is restored afterwards.
        """
        if self._sock is None:
            return
        try:
            previous = self._sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY)
            if not previous:
                self._sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
                self._sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 0)
        except OSError as exc:
            log(LogLevel.DEBUG, f"flush: {exc}\n")

    def stop(self) -> None:
        """Close the connection if there is one."""
        if self.connected():
            self.disconnect()
        elif self._sock is not None:
            self._close_socket()
            self.host = IPAddress()
            self.port = 0

    def connected(self) -> bool:
        """True while the connection is open, even if no data is waiting."""
        if self._sock is None:
            return False
        try:
            data = self._peek(1)
        except (BlockingIOError, TimeoutError):
            return True
        except OSError:
            return False
        return bool(data)

    def __bool__(self) -> bool:
        return self.connected()

    def set_no_delay(self, enabled: bool) -> None:
        """Switch the Nagle algorithm off (True) or on (False)."""
        if self._sock is not None:
            self._sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1 if enabled else 0)

    def __enter__(self) -> TCPClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()