"""
codecs.py

End-to-end compression of byte data and the value object holding the result.
"""


import struct
from typing import Optional

from .builders import HuffmanTreeBuilder, CodeTableGenerator
from .coders import HuffmanCoderSettings, HuffmanEncoder, HuffmanDecoder, Termination
from .logger import Logger
from .models import FrequencyTable, HuffmanTree
from .settings import FORMAT_VERSION, SENTINEL_SYMBOL
from .streams import BitStream
from .validators import validate_type, validate_byte_data, validate_symbol


class CompressedBlock:
    """Encoded data together with the in-memory tree needed to decode it."""

    def __init__(
        self,
        tree: HuffmanTree,
        data: bytes,
        bit_length: int,
        symbol_count: int,
        termination: int = Termination.COUNT,
        version: int = FORMAT_VERSION,
        sentinel: int = SENTINEL_SYMBOL,
    ) -> None:
        validate_type(tree, "Tree", HuffmanTree)
        validate_type(data, "Data", bytes)
        validate_type(bit_length, "Bit length", int)
        validate_type(symbol_count, "Symbol count", int)
        validate_type(version, "Version", int)
        if version != FORMAT_VERSION:
            raise ValueError("Version not supported")
        if termination not in (Termination.COUNT, Termination.SENTINEL):
            raise ValueError("Unknown termination: " + str(termination))
        validate_symbol(sentinel)
        if bit_length < 0 or symbol_count < 0:
            raise ValueError("Bit length and symbol count cannot be negative")
        if (bit_length + 7) // 8 != len(data):
            raise ValueError("Bit length does not match the data size")

        self.tree = tree
        self.data = data
        self.bit_length = bit_length
        self.symbol_count = symbol_count
        self.termination = termination
        self.version = version
        self.sentinel = sentinel

    def to_stream(self) -> BitStream:
        return BitStream.from_bytes(self.data, self.bit_length)

    def compression_ratio(self) -> float:
        """Encoded size over original size, in bits."""
        if self.symbol_count == 0:
            return 0.0
        return self.bit_length / (self.symbol_count * 8)

    @staticmethod
    def serialize(block: "CompressedBlock") -> bytes:
        """
        Serializes a CompressedBlock into bytes. The tree is not written.

        The format:
          - version (4 bytes, unsigned int)
          - termination (4 bytes, unsigned int)
          - sentinel (1 byte, unsigned char)
          - symbol_count (8 bytes, unsigned long long)
          - bit_length (8 bytes, unsigned long long)
          - data (ceil(bit_length / 8) bytes)
        """
        header = struct.pack(">IIBQQ", block.version, block.termination, block.sentinel,
                             block.symbol_count, block.bit_length)
        return header + block.data

    @staticmethod
    def deserialize(serialized: bytes, tree: HuffmanTree) -> "CompressedBlock":
        """
        Deserializes bytes produced by serialize(). The caller supplies the tree that encoded them.
        """
        validate_type(serialized, "Serialized data", bytes)
        header_size = struct.calcsize(">IIBQQ")
        if len(serialized) < header_size:
            raise ValueError("Serialized data is too short")
        version, termination, sentinel, symbol_count, bit_length = struct.unpack(">IIBQQ", serialized[:header_size])
        data = serialized[header_size:]
        if len(data) != (bit_length + 7) // 8:
            raise ValueError("Serialized data is incomplete")
        return CompressedBlock(tree, data, bit_length, symbol_count, termination, version, sentinel)


class HuffmanCodec:
    """Runs the whole pipeline: frequencies, tree, code table, bits, and back."""

    def __init__(self, settings: Optional[HuffmanCoderSettings] = None, logger: Optional[Logger] = None) -> None:
        if settings is not None:
            validate_type(settings, "Settings", HuffmanCoderSettings)
        self.settings = settings if settings is not None else HuffmanCoderSettings()
        self.logger = logger

    def compress(self, data: bytes) -> CompressedBlock:
        """
        Compress the input data.

        Args:
            data (bytes): The data to compress.

        Returns:
            CompressedBlock: The encoded bits and the tree that decodes them.
        """
        validate_byte_data(data)

        frequencies = FrequencyTable.from_data(data)
        if self.logger is not None:
            frequencies.dump(self.logger)

        tree = HuffmanTreeBuilder(self.logger).build(frequencies)
        code_table = CodeTableGenerator(self.logger).generate(tree)

        encoder = HuffmanEncoder(code_table, self.settings, self.logger)
        stream = encoder.encode(data)
        return CompressedBlock(tree, stream.to_bytes(), stream.bit_length, len(data),
                               self.settings.termination, sentinel=self.settings.sentinel)

    def decompress(self, block: CompressedBlock) -> bytes:
        """
        Decompress a block with its own tree.

        Args:
            block (CompressedBlock): The block returned by compress().

        Returns:
            bytes: The original data.
        """
        if not isinstance(block, CompressedBlock):
            raise ValueError("Input must be a CompressedBlock instance")

        settings = HuffmanCoderSettings(termination=block.termination, sentinel=block.sentinel)
        decoder = HuffmanDecoder(block.tree, settings, self.logger)
        stream = block.to_stream()
        if block.termination == Termination.COUNT:
            return decoder.decode(stream, block.symbol_count)
        return decoder.decode(stream)
