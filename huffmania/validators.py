"""
validators.py

Shared codes for input validation in huffmania.
"""


from typing import Any

from .settings import ALPHABET_SIZE


def validate_type(variable: Any, name: str, expected_type: type) -> None:
    """Validate that variable is of the expected type."""
    if not isinstance(variable, expected_type):
        raise ValueError(f"{name} must be of type {expected_type.__name__}")


def validate_byte_data(data: Any, name: str = "Data") -> None:
    """Validate that data is a bytes-like buffer."""
    if not isinstance(data, (bytes, bytearray)):
        raise ValueError(f"{name} must be bytes or bytearray")


def validate_symbol(symbol: Any) -> None:
    """Validate that symbol is a byte value."""
    if isinstance(symbol, bool) or not isinstance(symbol, int):
        raise ValueError("Symbol must be an int")
    if not 0 <= symbol < ALPHABET_SIZE:
        raise ValueError(f"Symbol must be in range 0..{ALPHABET_SIZE - 1}")


def validate_bit(bit: Any) -> None:
    """Validate that bit is 0 or 1."""
    if bit not in (0, 1):
        raise ValueError("Bit must be 0 or 1")
