"""Core value types shared across the package: addresses, hashes, logs and blocks."""

from __future__ import annotations

import binascii
from dataclasses import dataclass, field, replace
from typing import ClassVar

from Crypto.Hash import keccak


class AbiError(ValueError):
    """Raised when ABI data or a type description cannot be processed."""


def keccak256(data: bytes) -> bytes:
    """Return the legacy Keccak-256 digest of ``data``."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def encode_hex(data: bytes) -> str:
    """Return ``data`` as a lower-case hex string with a ``0x`` prefix."""
    return "0x" + bytes(data).hex()


def decode_hex(text: str) -> bytes:
    """Decode a hex string, with or without a ``0x`` prefix."""
    if text.startswith("0x"):
        text = text[2:]
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as exc:
        raise AbiError(f"could not decode hex: {exc}") from exc


class _FixedBytes(bytes):
    """Immutable byte string of a fixed length."""

    SIZE: ClassVar[int] = 0

    def __new__(cls, value: bytes | None = None):
        if value is None:
            raw = bytes(cls.SIZE)
        elif isinstance(value, int):
            raise TypeError(f"{cls.__name__} expects bytes, not int")
        else:
            raw = bytes(value)
        if len(raw) != cls.SIZE:
            raise AbiError(f"{cls.__name__} expects {cls.SIZE} bytes but got {len(raw)}")
        return super().__new__(cls, raw)

    @classmethod
    def _parse_hex(cls, text: str):
        return cls(decode_hex(text))

    def __str__(self) -> str:
        return encode_hex(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"


class Address(_FixedBytes):
    """A 20 byte account address."""

    SIZE = 20

    @classmethod
    def from_hex(cls, text: str) -> "Address":
        """Parse an address from its hex form."""
        return cls._parse_hex(text)

    def to_checksum(self) -> str:
        """Return the mixed-case checksummed hex form of the address."""
        plain = bytes(self).hex()
        digest = keccak256(plain.encode("ascii")).hex()
        chars = (
            ch.upper() if ch.isalpha() and int(nibble, 16) >= 8 else ch
            for ch, nibble in zip(plain, digest)
        )
        return "0x" + "".join(chars)

    def __str__(self) -> str:
        return self.to_checksum()


class Hash(_FixedBytes):
    """A 32 byte hash."""

    SIZE = 32

    @classmethod
    def from_hex(cls, text: str) -> "Hash":
        """Parse a hash from its hex form."""
        return cls._parse_hex(text)


@dataclass
class Log:
    """An event log emitted by a contract."""

    address: Address = Address()
    topics: list[Hash] = field(default_factory=list)
    data: bytes = b""
    block_number: int = 0
    block_hash: Hash = Hash()
    transaction_hash: Hash = Hash()
    log_index: int = 0
    removed: bool = False


@dataclass
class Block:
    """A block header with the hashes of its transactions."""

    number: int = 0
    hash: Hash = Hash()
    parent_hash: Hash = Hash()
    timestamp: int = 0
    miner: Address = Address()
    transactions: list[Hash] = field(default_factory=list)

    def copy(self) -> "Block":
        """Return a copy that shares no mutable state with this block."""
        return replace(self, transactions=list(self.transactions))