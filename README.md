# emodbuskit

Small building blocks for Modbus programs:

- `emodbuskit.coildata.CoilData` packs up to 2000 Modbus coils (bits) into bytes,
  LSB first, as Modbus carries them on the wire. It can be built from a readable
  bit image such as `"0001 0111 0000"`.
- `emodbuskit.logging_util` has log levels (`LogLevel`), a level-filtered `log()`
  and a hex dump formatter for raw message bytes.
- `emodbuskit.ip_address.IPAddress` is an IPv4 address with octet access.
- `emodbuskit.tcp_client.TCPClient` is a byte-oriented TCP client with
  `available()` / `peek()` / `read_byte()` / `read()` / `write()`.
- `emodbuskit.target.parse_target` turns `host[:port[:serverID]]` into a `Target`.

The package has no dependencies outside the standard library.

## Install

```
pip install .
```

## Coils

```python
from emodbuskit.coildata import CoilData

coils = CoilData(35)                 # 35 coils, all 0
coils.set(3, True)
coils.set_image(20, "0110 1001 0110")
print(coils.format("Coils: "))
print(coils.coils_on(), bytes(coils).hex())

sub = coils.slice(13, 12)            # coils 13..24, shifted to start at 0
assert coils.matches("0001 0000 0000 0000 0000 0110 1001 0110 000")
assert coils == "0001 0000 0000 0000 0000 0110 1001 0110 000"

other = CoilData.from_image("1101")
coils.set_coils(0, other)            # copy until either set is exhausted
coils.set_bits(8, 4, b"\x0f")        # packed LSB-first bits
coils.fill(False)
```

In a bit image, `0` and `1` are bits, an underscore makes the following bit be
ignored, and any other character (blanks, for example) is a separator.

Reading an index outside the set gives `False`. Writing out of range raises
`IndexError`; `set_bits()` with too few bytes or a length of 0, `set_coils()` with
an empty source, and `assign()` with an image of no bits or more than 2000 raise
`ValueError` (after `assign()` fails, the set is empty). `CoilData.from_image()`
returns an empty set for such an image instead of raising. Sizes above 2000 are
cut to 2000.

## Logging and hex dumps

```python
import sys
from emodbuskit.logging_util import LogLevel, format_hex_dump, hex_dump, log, set_log_level

set_log_level(LogLevel.INFO)
print(format_hex_dump("N", "Request", b"\x04\x03\x00\x00\x00\x0c"))
log(LogLevel.WARNING, "slow response\n", sys.stderr)
hex_dump("D", "Response", b"\x01\x84\xe0", LogLevel.DEBUG)   # not written at INFO
```

A message is written when the current level (`get_log_level()`, `ERROR` by
default) is at least the message's level; `log()` and `hex_dump()` return whether
they wrote anything. Each log line carries the milliseconds since import, the
caller's file name, line and function; critical messages are coloured red and
errors yellow with ANSI escapes. `file_name()` strips the directories from a path.

## IPv4 addresses

```python
from emodbuskit.ip_address import IPAddress, parse_dotted

addr = IPAddress("192.168.1.20")
assert int(addr) == 0xC0A80114
assert addr == IPAddress.from_octets(192, 168, 1, 20)
addr[3] = 21
print(addr, addr[0], addr.is_nil())
```

`parse_dotted()` accepts only digits and dots; anything else, or more than four
groups, gives `(0, 0, 0, 0)`.

## Targets and a TCP connection

```python
from emodbuskit.target import parse_target
from emodbuskit.tcp_client import TCPClient

target = parse_target("192.168.1.20:502:1")
with TCPClient(target.ip, target.port) as client:
    client.set_no_delay(True)
    client.write(bytes([0, 1, 0, 0, 0, 6, target.server_id, 3, 0, 0, 0, 8]))
    reply = client.read(260)
```

`parse_target` uses port 502 and server ID 1 when they are left out. It raises
`TargetError` (a `ValueError`) whose `code` is -1 for text that is neither an
address nor a host name or a host that cannot be resolved, -2 for a port outside
1..65535 and -3 for a server ID outside 1..247. Host names are resolved with
`hostname_to_ip()` unless a `resolve` function is passed.

`TCPClient.connect()` raises `OSError` when the connection fails. `disconnect()`
drains pending input for at most two seconds before closing.

## What this package does not do

It does not build or decode Modbus request and response messages, and it has
no Modbus client that sends requests and matches responses, no Modbus server,
no RTU (serial) support and no command-line program. The TCP client moves raw
bytes only; framing the MBAP header is up to the caller.

## Tests

```
pip install .[test]
pytest
```