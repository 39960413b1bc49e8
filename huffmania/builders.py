"""
builders.py

Huffman tree construction and code table generation.
"""


import numpy as np
from typing import Iterator, Optional, Tuple

from .errors import CapacityExceededError, DegenerateTreeError
from .logger import Logger, Log, LogLevel, NodeMergeLog
from .models import FrequencyTable, HuffmanTree, CodeTable
from .settings import ALPHABET_SIZE, MAX_TREE_NODES, MAX_CODE_TABLE_BITS, ABSENT
from .streams import BitStream
from .validators import validate_type


class HuffmanTreeBuilder:
    """
    Greedy tree construction by repeatedly merging the two lightest active nodes.

    Ties go to the lowest arena index, so the same frequencies always give the
    same tree. The frequency table passed in is left untouched; nodes already
    merged are tracked in a separate consumed mask.
    """

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self.logger: Optional[Logger] = logger

    def build(self, frequencies: FrequencyTable) -> HuffmanTree:
        """
        Build a tree from symbol frequencies.

        Args:
            frequencies (FrequencyTable): Accumulated byte counts.

        Returns:
            HuffmanTree: The finished tree with its root set.

        Raises:
            DegenerateTreeError: If no symbol has a nonzero count.
        """
        validate_type(frequencies, "Frequencies", FrequencyTable)
        distinct = frequencies.distinct_symbols()
        if not distinct:
            raise DegenerateTreeError("Cannot build a tree without any symbols")

        tree = HuffmanTree()
        tree.weights[:ALPHABET_SIZE] = frequencies.counts

        if len(distinct) == 1:
            return self._build_single(tree, frequencies, distinct[0])

        consumed = np.zeros(MAX_TREE_NODES, dtype=bool)
        next_free = ALPHABET_SIZE
        while True:
            ind1 = self._smallest(tree.weights, consumed, next_free)
            if ind1 == ABSENT:
                break
            consumed[ind1] = True

            ind2 = self._smallest(tree.weights, consumed, next_free)
            if ind2 == ABSENT:
                break
            consumed[ind2] = True

            self._merge(tree, next_free, ind1, ind2)
            next_free += 1

        tree.node_count = next_free
        tree.root = next_free - 1
        return tree

    @staticmethod
    def _smallest(weights: np.ndarray, consumed: np.ndarray, scan_size: int) -> int:
        """Index of the lightest unconsumed node with nonzero weight below scan_size."""
        active = np.flatnonzero((weights[:scan_size] > 0) & ~consumed[:scan_size])
        if active.size == 0:
            return ABSENT
        # argmin returns the first minimum, i.e. the lowest index
        return int(active[np.argmin(weights[active])])

    def _merge(self, tree: HuffmanTree, index: int, left: int, right: int) -> None:
        tree.weights[index] = tree.weights[left] + tree.weights[right]
        tree.left[index] = left
        tree.right[index] = right
        if self.logger is not None:
            self.logger.log(NodeMergeLog(index, left, right, int(tree.weights[index])))

    def _build_single(self, tree: HuffmanTree, frequencies: FrequencyTable, symbol: int) -> HuffmanTree:
        """
        One distinct symbol: pair it with an unused zero-weight leaf so it gets the 1-bit code 0.
        """
        placeholder = int(np.flatnonzero(frequencies.counts == 0)[0])
        if self.logger is not None:
            self.logger.log(Log("Single_symbol_tree", LogLevel.WARNING,
                                f"Only symbol {symbol} present, pairing it with placeholder leaf {placeholder}"))
        self._merge(tree, ALPHABET_SIZE, symbol, placeholder)
        tree.node_count = ALPHABET_SIZE + 1
        tree.root = ALPHABET_SIZE
        return tree


class CodeTableGenerator:
    """
    Walks a tree depth-first and packs every leaf's root-to-leaf path into one bit buffer.
    Left edges are 0, right edges are 1. Zero-weight leaves get no code.
    """

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self.logger: Optional[Logger] = logger

    def _walk(self, tree: HuffmanTree) -> Iterator[Tuple[int, Tuple[int, ...]]]:
        """Yield (leaf, path) pairs for coded leaves, left subtree first."""
        stack = [(tree.root, ())]
        while stack:
            index, path = stack.pop()
            if tree.is_leaf(index):
                if tree.weight(index) > 0:
                    yield index, path
                continue
            left, right = tree.children(index)
            stack.append((right, path + (1,)))
            stack.append((left, path + (0,)))

    def measure(self, tree: HuffmanTree) -> np.ndarray:
        """
        First pass: code length of every symbol.

        Returns:
            np.ndarray: Length per symbol, 0 for symbols without a code.
        """
        validate_type(tree, "Tree", HuffmanTree)
        if tree.root == ABSENT:
            raise DegenerateTreeError("Tree has no root")
        if tree.is_leaf(tree.root):
            raise DegenerateTreeError("Root is a leaf, its code would be empty")
        lengths = np.zeros(ALPHABET_SIZE, dtype=np.int64)
        for leaf, path in self._walk(tree):
            lengths[leaf] = len(path)
        return lengths

    def generate(self, tree: HuffmanTree) -> CodeTable:
        """
        Build the code table for a tree.

        Args:
            tree (HuffmanTree): A tree with its root set.

        Returns:
            CodeTable: Offsets, lengths and the packed code bits.
        """
        lengths = self.measure(tree)
        total_bits = int(lengths.sum())
        if total_bits > MAX_CODE_TABLE_BITS:
            raise CapacityExceededError(MAX_CODE_TABLE_BITS, total_bits)

        table = CodeTable(BitStream.for_bits(total_bits))
        table.lengths[:] = lengths

        # Second pass: leaves come out in the same order, so the write cursor is each code's offset.
        for leaf, path in self._walk(tree):
            table.offsets[leaf] = table.packed.offset
            for bit in path:
                table.packed.write_bit(bit)

        if self.logger is not None:
            table.dump(self.logger)
        return table
