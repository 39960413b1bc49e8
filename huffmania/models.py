"""
models.py

The shared objects used in huffmania.

"""


import numpy as np
from typing import Optional, List, Tuple

from .errors import UnknownSymbolError
from .logger import Logger, FrequencyLog, CodeAssignmentLog
from .settings import ALPHABET_SIZE, MAX_TREE_NODES, ABSENT
from .streams import BitStream
from .validators import validate_byte_data, validate_symbol


class FrequencyTable:
    """
    Occurrence count of each of the 256 byte values.
    """
    def __init__(self) -> None:
        self.counts: np.ndarray = np.zeros(ALPHABET_SIZE, dtype=np.uint64)

    @classmethod
    def from_data(cls, data: bytes) -> "FrequencyTable":
        table = cls()
        table.accumulate(data)
        return table

    def reset(self) -> None:
        self.counts[:] = 0

    def accumulate(self, data: bytes) -> None:
        """
        Add the byte counts of data to the table. Can be called repeatedly for chunked input.

        Args:
            data (bytes): The input chunk.
        """
        validate_byte_data(data)
        if len(data) == 0:
            return
        values = np.frombuffer(bytes(data), dtype=np.uint8)
        self.counts += np.bincount(values, minlength=ALPHABET_SIZE).astype(np.uint64)

    def count(self, symbol: int) -> int:
        validate_symbol(symbol)
        return int(self.counts[symbol])

    def total(self) -> int:
        return int(self.counts.sum())

    def distinct_symbols(self) -> List[int]:
        """Symbols with a nonzero count, in ascending order."""
        return np.flatnonzero(self.counts).tolist()

    def copy(self) -> "FrequencyTable":
        table = FrequencyTable()
        table.counts[:] = self.counts
        return table

    def dump(self, logger: Logger) -> None:
        for symbol in self.distinct_symbols():
            logger.log(FrequencyLog(symbol, int(self.counts[symbol])))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrequencyTable):
            return False
        return bool(np.array_equal(self.counts, other.counts))


class HuffmanTree:
    """
    Arena of tree nodes addressed by index.

    Indices 0..255 are the leaf slots of the byte values; internal nodes are
    allocated from 256 upwards in creation order. A node is a leaf iff its
    left child is ABSENT.
    """
    def __init__(self) -> None:
        self.weights: np.ndarray = np.zeros(MAX_TREE_NODES, dtype=np.uint64)
        self.left: np.ndarray = np.full(MAX_TREE_NODES, ABSENT, dtype=np.int64)
        self.right: np.ndarray = np.full(MAX_TREE_NODES, ABSENT, dtype=np.int64)
        self.root: int = ABSENT
        self.node_count: int = ALPHABET_SIZE

    def is_leaf(self, index: int) -> bool:
        return int(self.left[index]) == ABSENT

    def children(self, index: int) -> Tuple[int, int]:
        return int(self.left[index]), int(self.right[index])

    def weight(self, index: int) -> int:
        return int(self.weights[index])

    def symbol_of(self, index: int) -> int:
        """Byte value represented by a leaf index."""
        if index >= ALPHABET_SIZE or not self.is_leaf(index):
            raise ValueError(f"Node {index} is not a leaf")
        return index

    def internal_nodes(self) -> range:
        return range(ALPHABET_SIZE, self.node_count)

    def leaves(self) -> List[int]:
        """Leaf indices reachable from the root, in depth-first left-to-right order."""
        if self.root == ABSENT:
            return []
        found = []
        stack = [self.root]
        while stack:
            index = stack.pop()
            if self.is_leaf(index):
                found.append(index)
            else:
                left, right = self.children(index)
                stack.append(right)
                stack.append(left)
        return found

    def depth(self, index: int) -> int:
        """Number of edges from the root to index."""
        if self.root == ABSENT:
            raise ValueError("Tree has no root")
        stack = [(self.root, 0)]
        while stack:
            current, level = stack.pop()
            if current == index:
                return level
            if not self.is_leaf(current):
                left, right = self.children(current)
                stack.append((right, level + 1))
                stack.append((left, level + 1))
        raise ValueError(f"Node {index} is not reachable from the root")

    def shape(self) -> tuple:
        """Hashable description of every internal node, for comparing trees."""
        return (self.root,) + tuple(
            (index, int(self.left[index]), int(self.right[index]), int(self.weights[index]))
            for index in self.internal_nodes()
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HuffmanTree):
            return False
        return self.shape() == other.shape()


class CodeEntry:
    """
    Location of one symbol's code inside the packed code buffer.
    """
    def __init__(self, symbol: int, offset: int, length: int) -> None:
        self.symbol: int = symbol
        self.offset: int = offset
        self.length: int = length

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CodeEntry):
            return (self.symbol, self.offset, self.length) == (other.symbol, other.offset, other.length)
        return False

    def __repr__(self) -> str:
        return f"[{self.symbol}, {self.offset}, {self.length}]"


class CodeTable:
    """
    Per-symbol (offset, length) records into one packed bit buffer holding every code.
    A length of 0 means the symbol has no code.
    """
    def __init__(self, packed: Optional[BitStream] = None) -> None:
        self.offsets: np.ndarray = np.zeros(ALPHABET_SIZE, dtype=np.int64)
        self.lengths: np.ndarray = np.zeros(ALPHABET_SIZE, dtype=np.int64)
        self.packed: BitStream = packed if packed is not None else BitStream(0)

    @property
    def total_bits(self) -> int:
        return int(self.lengths.sum())

    def has_code(self, symbol: int) -> bool:
        return 0 <= symbol < ALPHABET_SIZE and int(self.lengths[symbol]) > 0

    def entry(self, symbol: int) -> CodeEntry:
        if not self.has_code(symbol):
            raise UnknownSymbolError(symbol)
        return CodeEntry(symbol, int(self.offsets[symbol]), int(self.lengths[symbol]))

    def code_bits(self, symbol: int) -> List[int]:
        entry = self.entry(symbol)
        return [self.packed.get_bit(position) for position in range(entry.offset, entry.offset + entry.length)]

    def code_string(self, symbol: int) -> str:
        return "".join(str(bit) for bit in self.code_bits(symbol))

    def symbols(self) -> List[int]:
        return np.flatnonzero(self.lengths).tolist()

    def encoded_bit_length(self, frequencies: FrequencyTable) -> int:
        """
        Exact number of bits needed to encode data with the given frequencies.

        Raises:
            UnknownSymbolError: If a counted symbol has no code.
        """
        for symbol in frequencies.distinct_symbols():
            if not self.has_code(symbol):
                raise UnknownSymbolError(symbol)
        return int(np.dot(frequencies.counts.astype(np.int64), self.lengths))

    def dump(self, logger: Logger) -> None:
        for symbol in self.symbols():
            logger.log(CodeAssignmentLog(symbol, self.code_string(symbol)))
