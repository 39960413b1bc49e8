"""
streams.py

Fixed-capacity bit buffer with sequential bit-level write and read.
"""


import numpy as np
from typing import List, Optional

from .errors import CapacityExceededError, StreamExhaustedError
from .settings import DEFAULT_STREAM_CAPACITY_BYTES
from .validators import validate_bit, validate_byte_data, validate_type


class BitStream:
    """
    A pre-sized buffer of bits addressed most-significant-bit first within each byte.

    The cursor (offset) is shared by reads and writes; reset() rewinds it without
    clearing the contents so one buffer can be written and then read back.
    """

    def __init__(self, capacity_bytes: int = DEFAULT_STREAM_CAPACITY_BYTES) -> None:
        """
        Args:
            capacity_bytes (int): Size of the backing buffer in bytes.
        """
        validate_type(capacity_bytes, "Capacity", int)
        if capacity_bytes < 0:
            raise ValueError("Capacity cannot be negative")
        self.buffer: np.ndarray = np.zeros(capacity_bytes, dtype=np.uint8)
        self.offset: int = 0
        self.length: int = 0

    @classmethod
    def for_bits(cls, bit_count: int) -> "BitStream":
        """Create a stream just large enough to hold bit_count bits."""
        validate_type(bit_count, "Bit count", int)
        if bit_count < 0:
            raise ValueError("Bit count cannot be negative")
        return cls((bit_count + 7) // 8)

    @classmethod
    def from_bytes(cls, data: bytes, bit_length: Optional[int] = None) -> "BitStream":
        """
        Wrap already encoded bytes in a stream positioned at bit 0.

        Args:
            data (bytes): Packed bits, MSB first.
            bit_length (Optional[int]): Number of meaningful bits; defaults to every bit of data.

        Returns:
            BitStream: A stream ready for reading.
        """
        validate_byte_data(data)
        stream = cls(len(data))
        stream.buffer[:] = np.frombuffer(bytes(data), dtype=np.uint8)
        if bit_length is None:
            bit_length = len(data) * 8
        validate_type(bit_length, "Bit length", int)
        if not 0 <= bit_length <= stream.capacity_bits:
            raise CapacityExceededError(stream.capacity_bits, bit_length)
        stream.length = bit_length
        return stream

    @property
    def capacity_bits(self) -> int:
        return int(self.buffer.size) * 8

    @property
    def bit_length(self) -> int:
        return self.length

    def write_bit(self, bit: int) -> None:
        """
        Write a single bit at the cursor and advance it.

        Raises:
            ValueError: If the bit is not 0 or 1.
            CapacityExceededError: If the buffer is full.
        """
        validate_bit(bit)
        if self.offset >= self.capacity_bits:
            raise CapacityExceededError(self.capacity_bits, self.offset + 1)
        index = self.offset // 8
        mask = np.uint8(1 << (7 - self.offset % 8))
        if bit:
            self.buffer[index] |= mask
        else:
            self.buffer[index] &= ~mask
        self.offset += 1
        if self.offset > self.length:
            self.length = self.offset

    def read_bit(self) -> int:
        """
        Read the bit at the cursor and advance it.

        Raises:
            StreamExhaustedError: If the cursor is at or past the last written bit.
        """
        bit = self.get_bit(self.offset)
        self.offset += 1
        return bit

    def get_bit(self, position: int) -> int:
        """Read the bit at an absolute position without moving the cursor."""
        if not 0 <= position < self.length:
            raise StreamExhaustedError(position, self.length)
        return (int(self.buffer[position // 8]) >> (7 - position % 8)) & 1

    def reset(self) -> None:
        self.offset = 0

    def remaining(self) -> int:
        """Number of written bits after the cursor."""
        return max(self.length - self.offset, 0)

    def bits(self) -> List[int]:
        return np.unpackbits(self.buffer)[:self.length].tolist()

    def to_bytes(self) -> bytes:
        """Pack the written bits into bytes, zero padded to a byte boundary."""
        return self.buffer[:(self.length + 7) // 8].tobytes()
