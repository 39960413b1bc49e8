import unittest

from huffmania.builders import HuffmanTreeBuilder, CodeTableGenerator
from huffmania.coders import HuffmanCoderSettings, HuffmanEncoder, HuffmanDecoder, Termination
from huffmania.models import FrequencyTable, HuffmanTree
from huffmania.streams import BitStream
from huffmania.errors import (
    CapacityExceededError,
    DegenerateTreeError,
    PrematureTerminationError,
    StreamExhaustedError,
    UnknownSymbolError,
)
from huffmania.logger import Logger, CodingLog

SENTINEL_TEXT = b'Now is the winter of our discount tents.\x00'


def pipeline(data):
    tree = HuffmanTreeBuilder().build(FrequencyTable.from_data(data))
    return tree, CodeTableGenerator().generate(tree)


class TestHuffmanCoderSettings(unittest.TestCase):
    def test_defaults(self):
        settings = HuffmanCoderSettings()
        self.assertIsNone(settings.stream_capacity_bytes)
        self.assertEqual(settings.termination, Termination.COUNT)
        self.assertEqual(settings.sentinel, 0)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            HuffmanCoderSettings(stream_capacity_bytes=-1)
        with self.assertRaises(ValueError):
            HuffmanCoderSettings(termination=99)
        with self.assertRaises(ValueError):
            HuffmanCoderSettings(sentinel=256)


class TestHuffmanEncoder(unittest.TestCase):
    def test_two_symbols(self):
        _, table = pipeline(b'aaab')
        stream = HuffmanEncoder(table).encode(b'aaab')
        self.assertEqual(stream.bit_length, 4)
        self.assertEqual(stream.bits(), [1, 1, 1, 0])

    def test_four_symbols(self):
        _, table = pipeline(b'abcd')
        stream = HuffmanEncoder(table).encode(b'abcd')
        self.assertEqual(stream.bit_length, 8)
        self.assertEqual(stream.to_bytes(), bytes([0b00011011]))

    def test_single_symbol(self):
        _, table = pipeline(b'aaaa')
        stream = HuffmanEncoder(table).encode(b'aaaa')
        self.assertEqual(stream.bits(), [0, 0, 0, 0])

    def test_unknown_symbol(self):
        _, table = pipeline(b'aaab')
        encoder = HuffmanEncoder(table)
        with self.assertRaises(UnknownSymbolError) as ctx:
            encoder.encode(b'abc')
        self.assertEqual(ctx.exception.symbol, ord('c'))

    def test_fixed_capacity_exceeded(self):
        _, table = pipeline(b'abcd')
        encoder = HuffmanEncoder(table, HuffmanCoderSettings(stream_capacity_bytes=1))
        encoder.encode(b'abcd')
        with self.assertRaises(CapacityExceededError):
            encoder.encode(b'abcda')

    def test_encode_into_existing_stream(self):
        _, table = pipeline(b'abcd')
        stream = BitStream(4)
        encoder = HuffmanEncoder(table)
        encoder.encode(b'ab', stream)
        encoder.encode(b'cd', stream)
        self.assertEqual(stream.to_bytes(), bytes([0b00011011]))

    def test_unknown_symbol_leaves_stream_untouched(self):
        _, table = pipeline(b'abcd')
        stream = BitStream(4)
        encoder = HuffmanEncoder(table)
        encoder.encode(b'ab', stream)
        with self.assertRaises(UnknownSymbolError):
            encoder.encode(b'cz', stream)
        self.assertEqual(stream.offset, 4)
        self.assertEqual(stream.bit_length, 4)
        self.assertEqual(stream.bits(), [0, 0, 0, 1])

    def test_capacity_checked_before_writing(self):
        _, table = pipeline(b'abcd')
        stream = BitStream(1)
        encoder = HuffmanEncoder(table)
        encoder.encode(b'abc', stream)
        with self.assertRaises(CapacityExceededError) as ctx:
            encoder.encode(b'ab', stream)
        self.assertEqual(ctx.exception.requested, 10)
        self.assertEqual(stream.offset, 6)
        self.assertEqual(stream.bit_length, 6)

    def test_encoded_bit_length(self):
        _, table = pipeline(b'aabbc')
        self.assertEqual(HuffmanEncoder(table).encoded_bit_length(b'aabbc'), 8)

    def test_sentinel_mode_checks_input(self):
        _, table = pipeline(b'ab\x00cd\x00')
        encoder = HuffmanEncoder(table, HuffmanCoderSettings(termination=Termination.SENTINEL))
        with self.assertRaises(PrematureTerminationError) as ctx:
            encoder.encode(b'ab\x00cd\x00')
        self.assertEqual(ctx.exception.decoded, b'ab\x00')
        with self.assertRaises(PrematureTerminationError):
            encoder.encode(b'abcd')

    def test_coding_log(self):
        logger = Logger()
        _, table = pipeline(b'aaab')
        HuffmanEncoder(table, logger=logger).encode(b'aaab')
        log = logger.get_logs(CodingLog)[0]
        self.assertEqual(log.symbol_size, 32)
        self.assertEqual(log.encoded_size, 4)


class TestHuffmanDecoder(unittest.TestCase):
    def roundtrip(self, data, settings=None):
        tree, table = pipeline(data)
        stream = HuffmanEncoder(table, settings).encode(data)
        stream.reset()
        return HuffmanDecoder(tree, settings).decode(stream, None if settings else len(data))

    def test_roundtrip_by_count(self):
        for data in [b'aaab', b'abcd', b'aaaa', b'\x00', b'\x00abc\x00\x00', bytes(range(256))]:
            self.assertEqual(self.roundtrip(data), data)

    def test_roundtrip_by_sentinel(self):
        settings = HuffmanCoderSettings(termination=Termination.SENTINEL)
        self.assertEqual(self.roundtrip(SENTINEL_TEXT, settings), SENTINEL_TEXT)

    def test_sentinel_stops_at_final_position(self):
        settings = HuffmanCoderSettings(termination=Termination.SENTINEL)
        tree, table = pipeline(SENTINEL_TEXT)
        stream = HuffmanEncoder(table, settings).encode(SENTINEL_TEXT)
        stream.reset()
        decoded = HuffmanDecoder(tree, settings).decode(stream)
        self.assertEqual(decoded[-1], 0)
        self.assertEqual(stream.offset, stream.bit_length)

    def test_premature_sentinel(self):
        data = b'ab\x00cd'
        tree, table = pipeline(data)
        stream = HuffmanEncoder(table).encode(data)
        stream.reset()
        decoder = HuffmanDecoder(tree, HuffmanCoderSettings(termination=Termination.SENTINEL))
        with self.assertRaises(PrematureTerminationError) as ctx:
            decoder.decode(stream)
        self.assertEqual(ctx.exception.decoded, b'ab\x00')

    def test_missing_sentinel_exhausts_stream(self):
        data = b'abcd'
        tree, table = pipeline(data)
        stream = HuffmanEncoder(table).encode(data)
        stream.reset()
        decoder = HuffmanDecoder(tree, HuffmanCoderSettings(termination=Termination.SENTINEL))
        with self.assertRaises(StreamExhaustedError):
            decoder.decode(stream)

    def test_count_longer_than_stream(self):
        tree, table = pipeline(b'abcd')
        stream = HuffmanEncoder(table).encode(b'abcd')
        stream.reset()
        with self.assertRaises(StreamExhaustedError):
            HuffmanDecoder(tree).decode(stream, 5)

    def test_count_required(self):
        tree, _ = pipeline(b'abcd')
        with self.assertRaises(ValueError):
            HuffmanDecoder(tree).decode(BitStream(1))

    def test_placeholder_leaf_is_unknown(self):
        tree, _ = pipeline(b'aaaa')
        stream = BitStream.from_bytes(bytes([0b10000000]), 1)
        with self.assertRaises(UnknownSymbolError):
            HuffmanDecoder(tree).decode(stream, 1)

    def test_degenerate_trees_rejected(self):
        with self.assertRaises(DegenerateTreeError):
            HuffmanDecoder(HuffmanTree())
        tree = HuffmanTree()
        tree.root = 65
        with self.assertRaises(DegenerateTreeError):
            HuffmanDecoder(tree)


if __name__ == '__main__':
    unittest.main()
