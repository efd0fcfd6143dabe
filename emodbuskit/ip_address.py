"""IPv4 addresses as four mutable octets."""

from __future__ import annotations


def parse_dotted(text: str) -> tuple[int, int, int, int]:
    """Convert a dotted address such as ``"1.2.3.4"`` into four octets.

    Digit groups accumulate modulo 256, missing trailing groups are 0, and any
    foreign character or more than four groups gives ``(0, 0, 0, 0)``.
    """
    octets = [0, 0, 0, 0]
    group = 0
    index = 0
    for char in text:
        if char == ".":
            octets[index] = group
            index += 1
            group = 0
            if index == 4:
                return (0, 0, 0, 0)
        elif "0" <= char <= "9":
            group = (group * 10 + ord(char) - ord("0")) & 0xFF
        else:
            return (0, 0, 0, 0)
    octets[index] = group
    return (octets[0], octets[1], octets[2], octets[3])


def _check_octet(value: int) -> int:
    if not 0 <= value <= 255:
        raise ValueError(f"octet {value} out of range 0..255")
    return value


class IPAddress:
    """An IPv4 address; the integer form has the first octet most significant."""

    __slots__ = ("_octets",)

    def __init__(self, value: int | str | IPAddress = 0) -> None:
        if isinstance(value, IPAddress):
            self._octets = bytearray(value._octets)
        elif isinstance(value, str):
            self._octets = bytearray(parse_dotted(value))
        elif isinstance(value, int):
            if not 0 <= value <= 0xFFFFFFFF:
                raise ValueError(f"address value {value} out of 32-bit range")
            self._octets = bytearray(value.to_bytes(4, "big"))
        else:
            raise TypeError(f"cannot build an address from {type(value).__name__}")

    @classmethod
    def from_octets(cls, b0: int, b1: int, b2: int, b3: int) -> IPAddress:
        """Build an address from its four octets, first one leftmost."""
        address = cls()
        address._octets[:] = bytes(_check_octet(b) for b in (b0, b1, b2, b3))
        return address

    def __int__(self) -> int:
        return int.from_bytes(self._octets, "big")

    def __str__(self) -> str:
        return ".".join(str(b) for b in self._octets)

    def __repr__(self) -> str:
        return f"IPAddress({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IPAddress):
            return self._octets == other._octets
        if isinstance(other, str):
            return tuple(self._octets) == parse_dotted(other)
        if isinstance(other, int):
            return int(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(int(self))

    def __getitem__(self, index: int) -> int:
        """Octet 0..3; other indexes read as 0."""
        if 0 <= index <= 3:
            return self._octets[index]
        return 0

    def __setitem__(self, index: int, value: int) -> None:
        """Change octet 0..3; writes to other indexes are ignored."""
        if 0 <= index <= 3:
            self._octets[index] = _check_octet(value)

    def is_nil(self) -> bool:
        """True for 0.0.0.0."""
        return not any(self._octets)