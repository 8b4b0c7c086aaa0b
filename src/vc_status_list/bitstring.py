"""
Fixed-length bit vector backing a StatusList2021.

Bit 0 is the leftmost (most significant) bit of byte 0, matching the W3C
StatusList2021 bit order.
"""

from __future__ import annotations

from vc_status_list.errors import IndexOutOfRangeError, InvalidArgumentError


def _check_length(length: object) -> int:
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise InvalidArgumentError(
            f'"length" must be a positive integer, got {length!r}.'
        )
    return length


class Bitstring:
    """A zero-initialized array of single-bit flags."""

    __slots__ = ("_length", "_bits")

    def __init__(self, length: int) -> None:
        """Allocate an all-zero bitstring.

        Args:
            length: Number of addressable bits.

        Raises:
            InvalidArgumentError: If length is not a positive integer.
        """
        self._length = _check_length(length)
        self._bits = bytearray((self._length + 7) // 8)

    @classmethod
    def from_bytes(cls, data: bytes, length: int | None = None) -> Bitstring:
        """Build a bitstring over a copy of raw bytes.

        Args:
            data: Backing bytes, MSB-first.
            length: Bit length to expose. Defaults to every bit in data.

        Raises:
            InvalidArgumentError: If length does not fit the byte buffer.
        """
        if length is None:
            length = len(data) * 8
        length = _check_length(length)
        if (length + 7) // 8 != len(data):
            raise InvalidArgumentError(
                f'"length" {length} does not match a buffer of {len(data)} bytes.'
            )
        bitstring = cls.__new__(cls)
        bitstring._length = length
        bitstring._bits = bytearray(data)
        return bitstring

    @property
    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        return self._length

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitstring):
            return NotImplemented
        return self._length == other._length and self._bits == other._bits

    def __repr__(self) -> str:
        return f"Bitstring(length={self._length}, set={self.count()})"

    def _locate(self, index: object) -> tuple[int, int]:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidArgumentError(f'"index" must be an integer, got {index!r}.')
        if index < 0 or index >= self._length:
            raise IndexOutOfRangeError(
                f"Index {index} out of range [0, {self._length})."
            )
        return index // 8, 7 - (index % 8)

    def get(self, index: int) -> bool:
        """Return True if the bit at index is set."""
        byte_index, bit_position = self._locate(index)
        return bool((self._bits[byte_index] >> bit_position) & 1)

    def set(self, index: int, value: bool) -> None:
        """Set or clear the bit at index."""
        byte_index, bit_position = self._locate(index)
        if value:
            self._bits[byte_index] |= 1 << bit_position
        else:
            self._bits[byte_index] &= ~(1 << bit_position) & 0xFF

    def count(self) -> int:
        """Number of set bits."""
        return sum(bin(byte).count("1") for byte in self._bits)

    def to_bytes(self) -> bytes:
        return bytes(self._bits)
