"""Packed storage for Modbus coil (single bit) values."""

from __future__ import annotations

from collections.abc import Iterator

MAX_COILS = 2000


def _byte_count(bits: int) -> int:
    return (bits + 7) // 8


def _image_bits(image: str) -> Iterator[bool]:
    """Yield the bits of a readable bit image such as ``"1101_0 0110"``.

    Only ``'0'`` and ``'1'`` count as bits. An underscore makes the next
    bit character be ignored; any other character cancels a pending skip.
    """
    skip = False
    for char in image:
        if char in "01":
            if skip:
                skip = False
            else:
                yield char == "1"
        elif char == "_":
            skip = True
        else:
            skip = False


class CoilData:
    """A fixed-size set of up to 2000 coils, stored LSB-first in bytes."""

    __slots__ = ("_size", "_buffer")
    __hash__ = None  # mutable

    def __init__(self, size: int = 0, init_value: bool = False) -> None:
        if size < 0:
            raise ValueError("coil count must not be negative")
        size = min(size, MAX_COILS)
        self._size = size
        count = _byte_count(size)
        self._buffer = bytearray(b"\xff" * count) if init_value else bytearray(count)
        if init_value:
            self._trim()

    @classmethod
    def from_image(cls, image: str) -> CoilData:
        """Build coils from a bit image; an image without valid bits gives an empty set."""
        coils = cls()
        try:
            coils.assign(image)
        except ValueError:
            pass
        return coils

    def copy(self) -> CoilData:
        """Return an independent copy."""
        other = CoilData()
        other._size = self._size
        other._buffer = bytearray(self._buffer)
        return other

    # --- internal bit access -------------------------------------------------

    def _trim(self) -> None:
        """Clear the unused bits in the last byte."""
        if self._size:
            last_bit = (self._size - 1) & 0x07
            self._buffer[-1] &= (1 << (last_bit + 1)) - 1

    def _get(self, index: int) -> bool:
        return bool(self._buffer[index >> 3] & (1 << (index & 0x07)))

    def _put(self, index: int, value: bool) -> None:
        mask = 1 << (index & 0x07)
        if value:
            self._buffer[index >> 3] |= mask
        else:
            self._buffer[index >> 3] &= ~mask & 0xFF

    # --- comparison and container protocol ----------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CoilData):
            return self._size == other._size and self._buffer == other._buffer
        if isinstance(other, str):
            return self.matches(other)
        return NotImplemented

    def __getitem__(self, index: int) -> bool:
        """Value of one coil; indexes outside the set read as False."""
        if 0 <= index < self._size:
            return self._get(index)
        return False

    def __iter__(self) -> Iterator[bool]:
        return (self._get(i) for i in range(self._size))

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __bytes__(self) -> bytes:
        return bytes(self._buffer)

    def __repr__(self) -> str:
        bits = "".join("1" if bit else "0" for bit in self)
        return f"CoilData({bits!r})"

    def to_bytes(self) -> bytes:
        """The packed coil bytes, as sent in Modbus messages."""
        return bytes(self._buffer)

    # --- slicing and modification -------------------------------------------

    def slice(self, start: int = 0, length: int = 0) -> CoilData:
        """Return ``length`` coils from ``start`` shifted to position 0.

        A length of 0 means all coils up to the end. Requests that do not
        fit give an empty set.
        """
        result = CoilData()
        if self._size == 0 or start < 0 or start > self._size:
            return result
        if length == 0:
            length = self._size - start
        if length < 0 or start + length > self._size:
            return result
        result = CoilData(length)
        for target, source in enumerate(range(start, start + length)):
            if self._get(source):
                result._put(target, True)
        return result

    def set(self, index: int, value: bool) -> None:
        """Set a single coil."""
        if not 0 <= index < self._size:
            raise IndexError(f"coil index {index} out of range 0..{self._size - 1}")
        self._put(index, bool(value))

    def set_bits(self, start: int, length: int, data: bytes) -> None:
        """Overwrite ``length`` coils from ``start`` with LSB-first packed bits."""
        if length <= 0:
            raise ValueError("length must be positive")
        if len(data) < _byte_count(length):
            raise ValueError(f"{length} coils need {_byte_count(length)} bytes, got {len(data)}")
        if start < 0 or start + length > self._size:
            raise IndexError(f"coils {start}..{start + length - 1} do not fit in {self._size}")
        for offset in range(length):
            bit = bool(data[offset >> 3] & (1 << (offset & 0x07)))
            self._put(start + offset, bit)

    def set_coils(self, index: int, other: CoilData) -> None:
        """Copy coils from ``other`` starting at ``index`` until either set is exhausted."""
        if not other:
            raise ValueError("source coil set is empty")
        if not 0 <= index < self._size:
            raise IndexError(f"coil index {index} out of range for {self._size} coils")
        length = min(self._size - index, len(other))
        for offset in range(length):
            self._put(index + offset, other._get(offset))

    def set_image(self, index: int, image: str) -> None:
        """Overwrite coils from ``index`` with a bit image until either is exhausted."""
        if not 0 <= index < self._size:
            raise IndexError(f"coil index {index} out of range for {self._size} coils")
        for position, bit in zip(range(index, self._size), _image_bits(image)):
            self._put(position, bit)

    def assign(self, image: str) -> None:
        """Replace all coils by a bit image.

        The old content is dropped in any case; if the image holds no valid
        bits or more than 2000, the set stays empty and ValueError is raised.
        """
        bits = list(_image_bits(image))
        self._size = 0
        self._buffer = bytearray()
        if not bits or len(bits) > MAX_COILS:
            raise ValueError(f"bit image must hold 1..{MAX_COILS} bits, found {len(bits)}")
        self._size = len(bits)
        self._buffer = bytearray(_byte_count(len(bits)))
        for index, bit in enumerate(bits):
            if bit:
                self._put(index, True)

    def matches(self, image: str) -> bool:
        """Compare with a bit image.

        Bits of the image are compared with the coils in order; the image may
        be shorter than the set, but any valid bit beyond the last coil makes
        the comparison fail.
        """
        for index, bit in enumerate(_image_bits(image)):
            if index >= self._size or self._get(index) != bit:
                return False
        return True

    def fill(self, value: bool = False) -> None:
        """Set all coils to the same value."""
        fill_byte = 0xFF if value else 0x00
        self._buffer[:] = bytes([fill_byte]) * len(self._buffer)
        self._trim()

    # --- information ----------------------------------------------------------

    def coils(self) -> int:
        """Number of coils."""
        return self._size

    def byte_size(self) -> int:
        """Number of bytes holding the coils."""
        return len(self._buffer)

    def coils_on(self) -> int:
        """Number of coils set to 1."""
        return sum(bin(byte).count("1") for byte in self._buffer)

    def coils_off(self) -> int:
        """Number of coils set to 0."""
        return self._size - self.coils_on()

    def format(self, label: str = "") -> str:
        """Render the coils as ``0``/``1`` groups of four after ``label``.

        Lines break after a group once 80 columns are reached; continuation
        lines are indented by the label width.
        """
        label_len = len(label)
        parts = [label]
        pos = label_len
        for index in range(self._size):
            parts.append("1" if self._get(index) else "0")
            pos += 1
            if index % 4 == 3:
                if pos >= 80:
                    parts.append("\n" + " " * label_len)
                    pos = label_len + 1
                else:
                    parts.append(" ")
                    pos += 1
        return "".join(parts)