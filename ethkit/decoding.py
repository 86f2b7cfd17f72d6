"""Decoding of contract ABI binary data into Python values."""

from __future__ import annotations

import dataclasses
from typing import Any, TypeVar

from .abitype import Kind, Type
from .primitives import AbiError, Address

_WORD = 32
_MAX_INT256 = (1 << 255) - 1
_TWO_256 = 1 << 256
_SMALL_SIZES = (8, 16, 32, 64)

T = TypeVar("T")


def decode(typ: Type, data: bytes) -> Any:
    """Decode ``data`` according to the ABI type ``typ``."""
    raw = bytes(data)
    if not raw:
        raise AbiError("empty input")
    value, _ = _decode(typ, memoryview(raw))
    return value


def decode_struct(typ: Type, data: bytes, cls: type[T]) -> T:
    """Decode a tuple and build an instance of the dataclass ``cls`` from it."""
    if not (dataclasses.is_dataclass(cls) and isinstance(cls, type)):
        raise AbiError("decode_struct expects a dataclass type")
    value = decode(typ, data)
    if not isinstance(value, dict):
        raise AbiError("expected a tuple value")

    lowered = {key.lower(): item for key, item in value.items()}
    kwargs: dict[str, Any] = {}
    for item in dataclasses.fields(cls):
        if not item.init or item.name.startswith("_"):
            continue
        tag = item.metadata.get("abi", "")
        if tag == "-":
            continue
        key = tag or item.name
        if key in value:
            kwargs[item.name] = value[key]
        elif key.lower() in lowered:
            kwargs[item.name] = lowered[key.lower()]
    return cls(**kwargs)


def read_integer(typ: Type, word: bytes) -> int:
    """Read an integer of the given type from a 32 byte word."""
    signed = typ.kind is Kind.INT
    if typ.size in _SMALL_SIZES:
        width = typ.size // 8
        return int.from_bytes(bytes(word[-width:]), "big", signed=signed)
    number = int.from_bytes(bytes(word), "big")
    if signed and number > _MAX_INT256:
        number -= _TWO_256
    return number


def read_address(word: bytes) -> Address:
    """Read an address from the last 20 bytes of a 32 byte word."""
    if len(word) != _WORD:
        raise AbiError("len is not correct")
    return Address(bytes(word[12:]))


def read_fixed_bytes(typ: Type, word: bytes) -> bytes:
    """Read the leading fixed-size bytes of a word."""
    return bytes(word[: typ.size])


def _read_function(word: memoryview) -> bytes:
    if any(word[24:32]):
        raise AbiError(
            "function type expects the last 8 bytes to be empty but found: "
            + bytes(word[24:32]).hex()
        )
    return bytes(word[:24])


def _decode_bool(word: memoryview) -> bool:
    last = word[31]
    if last == 0:
        return False
    if last == 1:
        return True
    raise AbiError("bad boolean")


def _read_word_number(data: memoryview, what: str) -> int:
    number = int.from_bytes(bytes(data[:_WORD]), "big")
    if number.bit_length() > 63:
        raise AbiError(f"{what} larger than int64")
    return number


def _read_offset(data: memoryview, limit: int) -> int:
    offset = _read_word_number(data, "offset")
    if offset > limit:
        raise AbiError(f"offset insufficient {limit} require {offset}")
    return offset


def _read_length(data: memoryview) -> int:
    length = _read_word_number(data, "length")
    if length > len(data) - _WORD:
        raise AbiError(f"length insufficient {len(data)} require {length}")
    return length


def _decode(typ: Type, data: memoryview) -> tuple[Any, memoryview]:
    if len(data) < _WORD:
        raise AbiError("incorrect length")

    length = _read_length(data) if typ.is_variable_input() else 0
    kind = typ.kind
    if kind is Kind.TUPLE:
        return _decode_tuple(typ, data)
    if kind is Kind.SLICE:
        return _decode_sequence(typ, data[_WORD:], length)
    if kind is Kind.ARRAY:
        return _decode_sequence(typ, data, typ.size)

    word = data[:_WORD]
    if kind is Kind.BOOL:
        value: Any = _decode_bool(word)
    elif kind in (Kind.INT, Kind.UINT):
        value = read_integer(typ, word)
    elif kind is Kind.STRING:
        value = bytes(data[_WORD:_WORD + length]).decode("utf-8", errors="replace")
    elif kind is Kind.BYTES:
        value = bytes(data[_WORD:_WORD + length])
    elif kind is Kind.ADDRESS:
        value = read_address(word)
    elif kind is Kind.FIXED_BYTES:
        value = read_fixed_bytes(typ, word)
    elif kind is Kind.FUNCTION:
        value = _read_function(word)
    else:
        raise AbiError(f"decoding not available for type '{kind}'")
    return value, data[_WORD:]


def _decode_tuple(typ: Type, data: memoryview) -> tuple[dict[str, Any], memoryview]:
    result: dict[str, Any] = {}
    orig = data
    for index, item in enumerate(typ.elems):
        if len(data) < _WORD:
            raise AbiError("incorrect length")

        dynamic = item.elem.is_dynamic()
        entry = orig[_read_offset(data, len(orig)):] if dynamic else data
        value, tail = _decode(item.elem, entry)
        data = data[_WORD:] if dynamic else tail

        name = item.name or str(index)
        if name in result:
            raise AbiError("tuple with repeated values")
        result[name] = value
    return result, data


def _decode_sequence(typ: Type, data: memoryview, size: int) -> tuple[list[Any], memoryview]:
    if size < 0:
        raise AbiError("size is lower than zero")
    if _WORD * size > len(data):
        raise AbiError("size is too big")

    orig = data
    dynamic = typ.elem.is_dynamic()
    result: list[Any] = []
    for _ in range(size):
        if len(data) < _WORD:
            raise AbiError("incorrect length")
        entry = orig[_read_offset(data, len(orig)):] if dynamic else data
        value, tail = _decode(typ.elem, entry)
        data = data[_WORD:] if dynamic else tail
        result.append(value)
    return result, data