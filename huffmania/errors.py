"""
errors.py

Failures raised by huffmania. All derive from ValueError so callers that
already catch bad-input errors keep working.
"""

from typing import Optional


class HuffmanError(ValueError):
    """Base class for every huffmania failure."""


class CapacityExceededError(HuffmanError):
    """A fixed-size buffer would overflow."""

    def __init__(self, capacity: int, requested: int) -> None:
        self.capacity = capacity
        self.requested = requested
        super().__init__(f"Capacity exceeded: requested bit {requested} of {capacity}")


class StreamExhaustedError(HuffmanError):
    """A read was attempted past the last written bit."""

    def __init__(self, offset: int, length: int) -> None:
        self.offset = offset
        self.length = length
        super().__init__(f"Read past end of stream at bit {offset} (length {length})")


class UnknownSymbolError(HuffmanError):
    """A symbol has no assigned code."""

    def __init__(self, symbol: int) -> None:
        self.symbol = symbol
        super().__init__(f"Symbol {symbol} has no code in this tree")


class DegenerateTreeError(HuffmanError):
    """The frequencies cannot produce a usable tree."""


class PrematureTerminationError(HuffmanError):
    """The sentinel symbol appears before the real end of the data."""

    def __init__(self, message: str, decoded: Optional[bytes] = None) -> None:
        self.decoded = decoded
        super().__init__(message)
