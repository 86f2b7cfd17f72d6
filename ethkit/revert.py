"""Decoding of revert reasons returned by failed calls."""

from __future__ import annotations

from .abitype import new_type
from .decoding import decode
from .primitives import AbiError

_REVERT_ID = bytes([0x08, 0xC3, 0x79, 0xA0])


def unpack_revert_error(data: bytes) -> str:
    """Return the reason string of an ``Error(string)`` revert payload."""
    raw = bytes(data)
    if not raw.startswith(_REVERT_ID):
        raise AbiError("revert error prefix not found")
    values = decode(new_type("tuple(string)"), raw[len(_REVERT_ID):])
    return values["0"]