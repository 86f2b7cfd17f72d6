"""Helpers for Ethereum Name Service names."""

from __future__ import annotations

from .primitives import Address, Hash, keccak256


def name_hash(name: str) -> Hash:
    """Return the namehash of an ENS name; the empty name hashes to zero."""
    node = bytes(32)
    if not name:
        return Hash(node)
    for label in reversed(name.split(".")):
        node = keccak256(node + keccak256(label.encode("utf-8")))
    return Hash(node)


def address_to_reverse_domain(address: Address) -> str:
    """Return the reverse lookup domain of ``address``."""
    return bytes(address).hex() + ".addr.reverse"