"""
coders.py

Bit-level encoding of byte data with a code table, and decoding by walking the tree.
"""


from typing import Optional

from .errors import CapacityExceededError, DegenerateTreeError, PrematureTerminationError, UnknownSymbolError
from .logger import Logger, CodingLog, CodingProgressStep, DecodingProgressStep
from .models import FrequencyTable, HuffmanTree, CodeTable
from .settings import ABSENT, SENTINEL_SYMBOL
from .streams import BitStream
from .validators import validate_byte_data, validate_symbol, validate_type


class Termination:
    """How the decoder knows where the data ends."""
    COUNT = 1
    SENTINEL = 2


class HuffmanCoderSettings:
    """
    Settings for the Huffman coders.
    """

    def __init__(self, stream_capacity_bytes: Optional[int] = None, termination: int = Termination.COUNT,
                 sentinel: int = SENTINEL_SYMBOL) -> None:
        """
        Args:
            stream_capacity_bytes (Optional[int]): Fixed output buffer size; None sizes it to the exact encoded length.
            termination (int): Termination.COUNT or Termination.SENTINEL.
            sentinel (int): Symbol that ends decoding in sentinel mode.
        """
        if stream_capacity_bytes is not None:
            validate_type(stream_capacity_bytes, "Stream capacity", int)
            if stream_capacity_bytes < 0:
                raise ValueError("Stream capacity cannot be negative")
        if termination not in (Termination.COUNT, Termination.SENTINEL):
            raise ValueError("Unknown termination: " + str(termination))
        validate_symbol(sentinel)
        self.stream_capacity_bytes: Optional[int] = stream_capacity_bytes
        self.termination: int = termination
        self.sentinel: int = sentinel


class HuffmanEncoder:
    """
    Turns bytes into bits using a code table.
    """

    def __init__(self, code_table: CodeTable, settings: Optional[HuffmanCoderSettings] = None,
                 logger: Optional[Logger] = None) -> None:
        validate_type(code_table, "Code table", CodeTable)
        self.code_table: CodeTable = code_table
        self.settings: HuffmanCoderSettings = settings if settings is not None else HuffmanCoderSettings()
        self.logger: Optional[Logger] = logger

    def check_termination(self, data: bytes) -> None:
        """
        In sentinel mode the data must end with the sentinel and contain it nowhere else.

        Raises:
            PrematureTerminationError: If decoding would stop early or never stop.
        """
        if self.settings.termination != Termination.SENTINEL:
            return
        sentinel = self.settings.sentinel
        position = bytes(data).find(bytes([sentinel]))
        if position == -1:
            raise PrematureTerminationError(f"Data does not end with sentinel {sentinel}")
        if position != len(data) - 1:
            raise PrematureTerminationError(
                f"Sentinel {sentinel} at position {position} would end decoding before the last byte",
                decoded=bytes(data[:position + 1]))

    def encoded_bit_length(self, data: bytes) -> int:
        """
        Number of bits data will take once encoded.

        Raises:
            UnknownSymbolError: If a byte of data has no code.
        """
        validate_byte_data(data)
        return self.code_table.encoded_bit_length(FrequencyTable.from_data(data))

    def encode(self, data: bytes, stream: Optional[BitStream] = None) -> BitStream:
        """
        Append the code of every byte of data to a stream.

        Args:
            data (bytes): The data to encode.
            stream (Optional[BitStream]): Output stream; a new one is allocated when omitted.

        Returns:
            BitStream: The stream holding the encoded bits.

        Raises:
            UnknownSymbolError: If a byte has no code.
            CapacityExceededError: If the stream is too small.
        """
        validate_byte_data(data)
        self.check_termination(data)
        needed = self.encoded_bit_length(data)
        if stream is None:
            if self.settings.stream_capacity_bytes is None:
                stream = BitStream.for_bits(needed)
            else:
                stream = BitStream(self.settings.stream_capacity_bytes)
        else:
            validate_type(stream, "Stream", BitStream)
        # nothing is written unless every code fits
        if stream.offset + needed > stream.capacity_bits:
            raise CapacityExceededError(stream.capacity_bits, stream.offset + needed)

        start = stream.offset
        packed = self.code_table.packed
        for symbol in data:
            entry = self.code_table.entry(symbol)
            for position in range(entry.offset, entry.offset + entry.length):
                stream.write_bit(packed.get_bit(position))
            if self.logger is not None:
                self.logger.log(CodingProgressStep("Encoded symbol", len(data)))

        if self.logger is not None:
            self.logger.log(CodingLog(len(data) * 8, stream.offset - start))
        return stream


class HuffmanDecoder:
    """
    Turns bits back into bytes by walking the tree that produced the codes.
    """

    def __init__(self, tree: HuffmanTree, settings: Optional[HuffmanCoderSettings] = None,
                 logger: Optional[Logger] = None) -> None:
        validate_type(tree, "Tree", HuffmanTree)
        if tree.root == ABSENT:
            raise DegenerateTreeError("Tree has no root")
        if tree.is_leaf(tree.root):
            raise DegenerateTreeError("Root is a leaf, nothing can be decoded")
        self.tree: HuffmanTree = tree
        self.settings: HuffmanCoderSettings = settings if settings is not None else HuffmanCoderSettings()
        self.logger: Optional[Logger] = logger

    def decode_symbol(self, stream: BitStream) -> int:
        """
        Read bits until a leaf is reached and return its symbol.

        Raises:
            StreamExhaustedError: If the stream ends inside a code.
            UnknownSymbolError: If the path leads to a leaf that has no code.
        """
        tree = self.tree
        current = tree.root
        while True:
            left, right = tree.children(current)
            current = right if stream.read_bit() else left
            if tree.is_leaf(current):
                break
        if tree.weight(current) == 0:
            raise UnknownSymbolError(current)
        return tree.symbol_of(current)

    def decode(self, stream: BitStream, symbol_count: Optional[int] = None) -> bytes:
        """
        Decode symbols from the stream's cursor onwards.

        Args:
            stream (BitStream): The encoded bits, positioned at the first code.
            symbol_count (Optional[int]): Number of symbols to decode; required in count mode.

        Returns:
            bytes: The decoded data. In sentinel mode it ends with the sentinel.
        """
        validate_type(stream, "Stream", BitStream)
        if self.settings.termination == Termination.COUNT:
            if symbol_count is None:
                raise ValueError("Symbol count is required when decoding by count")
            validate_type(symbol_count, "Symbol count", int)
            if symbol_count < 0:
                raise ValueError("Symbol count cannot be negative")
            out = bytearray(symbol_count)
            for i in range(symbol_count):
                out[i] = self.decode_symbol(stream)
                if self.logger is not None:
                    self.logger.log(DecodingProgressStep("Decoded symbol", symbol_count))
            return bytes(out)

        out = bytearray()
        while True:
            symbol = self.decode_symbol(stream)
            out.append(symbol)
            if self.logger is not None:
                self.logger.log(DecodingProgressStep("Decoded symbol"))
            if symbol == self.settings.sentinel:
                break
        if stream.remaining() > 0:
            raise PrematureTerminationError(
                f"Sentinel decoded with {stream.remaining()} bits left in the stream", decoded=bytes(out))
        return bytes(out)
