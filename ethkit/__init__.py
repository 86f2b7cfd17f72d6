"""Ethereum ABI encoding and decoding, event parsing, block tracking and ENS helpers."""

__version__ = "0.1.0"

__all__ = [
    "abi",
    "abitype",
    "blocktracker",
    "decoding",
    "encoding",
    "ens",
    "fourbyte",
    "primitives",
    "revert",
    "topics",
]