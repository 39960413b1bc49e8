"""
huffmania: Huffman coding of byte streams with a fixed 256-symbol alphabet.
"""

from .codecs import (
    CompressedBlock,
    HuffmanCodec,
)

from .coders import (
    Termination,
    HuffmanCoderSettings,
    HuffmanEncoder,
    HuffmanDecoder,
)

from .builders import (
    HuffmanTreeBuilder,
    CodeTableGenerator,
)

from .models import (
    FrequencyTable,
    HuffmanTree,
    CodeEntry,
    CodeTable,
)

from .streams import BitStream

from .errors import (
    HuffmanError,
    CapacityExceededError,
    StreamExhaustedError,
    UnknownSymbolError,
    DegenerateTreeError,
    PrematureTerminationError,
)

from .settings import (
    ALPHABET_SIZE,
    MAX_TREE_NODES,
    ABSENT,
    SENTINEL_SYMBOL,
    MAX_CODE_TABLE_BITS,
    DEFAULT_STREAM_CAPACITY_BYTES,
    FORMAT_VERSION,
)

from .logger import (
    Logger,
    Log,
    LogLevel,
    FrequencyLog,
    NodeMergeLog,
    CodeAssignmentLog,
    CodingLog,
    CodingProgressStep,
    DecodingProgressStep,
)

# Validators
from .validators import *

__all__ = [

    "CompressedBlock",
    "HuffmanCodec",

    "Termination",
    "HuffmanCoderSettings",
    "HuffmanEncoder",
    "HuffmanDecoder",

    "HuffmanTreeBuilder",
    "CodeTableGenerator",

    "FrequencyTable",
    "HuffmanTree",
    "CodeEntry",
    "CodeTable",

    "BitStream",

    "HuffmanError",
    "CapacityExceededError",
    "StreamExhaustedError",
    "UnknownSymbolError",
    "DegenerateTreeError",
    "PrematureTerminationError",

    "ALPHABET_SIZE",
    "MAX_TREE_NODES",
    "ABSENT",
    "SENTINEL_SYMBOL",
    "MAX_CODE_TABLE_BITS",
    "DEFAULT_STREAM_CAPACITY_BYTES",
    "FORMAT_VERSION",

    "Logger",
    "Log",
    "LogLevel",
    "FrequencyLog",
    "NodeMergeLog",
    "CodeAssignmentLog",
    "CodingLog",
    "CodingProgressStep",
    "DecodingProgressStep",
]
