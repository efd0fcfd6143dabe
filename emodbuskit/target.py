"""Parsing of ``host[:port[:serverID]]`` target descriptors."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from .ip_address import IPAddress
from .tcp_client import hostname_to_ip

DEFAULT_PORT = 502
DEFAULT_SERVER_ID = 1

_IP_PATTERN = re.compile(
    r"((\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3}))(:(\d{1,5})(:(\d{1,3}))?)?", re.ASCII
)
_HOST_PATTERN = re.compile(
    r"(([a-zA-Z0-9][a-zA-Z0-9\-]*)(\.[a-zA-Z0-9][a-zA-Z0-9\-]*)*)(:(\d{1,5})(:(\d{1,3}))?)?",
    re.ASCII,
)


class TargetError(ValueError):
    """An unusable target descriptor.

    ``code`` is -1 for an unknown host, -2 for a bad port, -3 for a bad server ID.
    """

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass
class Target:
    """Address, TCP port and Modbus server ID of a Modbus TCP server."""

    ip: IPAddress = field(default_factory=IPAddress)
    port: int = DEFAULT_PORT
    server_id: int = DEFAULT_SERVER_ID


def parse_target(
    source: str, resolve: Callable[[str], IPAddress] | None = None
) -> Target:
    """Parse ``IP[:port[:serverID]]`` or ``hostname[:port[:serverID]]``.

    Each IP octet must be 1..255, otherwise the text is treated as a host name
    and looked up with ``resolve`` (a DNS lookup by default). Raises TargetError.
    """
    lookup = resolve if resolve is not None else hostname_to_ip
    port_text = server_text = None

    match = _IP_PATTERN.fullmatch(source)
    if match and all(1 <= int(match.group(i)) <= 255 for i in range(2, 6)):
        ip = IPAddress(match.group(1))
        port_text, server_text = match.group(7), match.group(9)
    else:
        match = _HOST_PATTERN.fullmatch(source)
        if match is None:
            raise TargetError(-1, f"invalid target descriptor {source!r}")
        ip = lookup(match.group(1))
        if ip.is_nil():
            raise TargetError(-1, f"no address found for host {match.group(1)!r}")
        port_text, server_text = match.group(5), match.group(7)

    target = Target(ip=ip)
    if port_text:
        port = int(port_text)
        if not 0 < port < 65536:
            raise TargetError(-2, f"invalid port number {port}")
        target.port = port
        if server_text:
            server_id = int(server_text)
            if not 0 < server_id < 248:
                raise TargetError(-3, f"invalid server ID {server_id}")
            target.server_id = server_id
    return target