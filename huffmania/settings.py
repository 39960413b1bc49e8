"""
settings.py

Fixed bounds and defaults shared across huffmania.
"""

# One leaf slot per byte value.
ALPHABET_SIZE = 256

# 256 leaves plus at most 255 internal nodes.
MAX_TREE_NODES = 2 * ALPHABET_SIZE - 1

# Marks a missing child in the tree arena.
ABSENT = -1

# Symbol that ends decoding in sentinel mode.
SENTINEL_SYMBOL = 0

# Worst case for all codes packed together: 1 + 2 + ... + 256 bits.
MAX_CODE_TABLE_BITS = (ALPHABET_SIZE + 1) * ALPHABET_SIZE - 1

DEFAULT_STREAM_CAPACITY_BYTES = 8192

FORMAT_VERSION = 1
