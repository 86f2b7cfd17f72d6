"""Encoding of Python values into the contract ABI binary format."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from typing import Any, Callable

from .abitype import Kind, Type, type_size
from .primitives import AbiError, Address, decode_hex

_WORD = 32
_MASK = (1 << 256) - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")
_HEXADECIMAL = re.compile(r"[+-]?[0-9a-fA-F]+")
_BYTES_LIKE = (bytes, bytearray, memoryview)


def _encode_error(value: Any, target: str) -> AbiError:
    return AbiError(f"failed to encode {type(value).__name__} as {target}")


def _pad(data: bytes, size: int, left: bool) -> bytes:
    data = bytes(data)
    length = len(data)
    if length == size:
        return data
    if length > size:
        return data[length - size:]
    fill = bytes(size - length)
    return fill + data if left else data + fill


def left_pad(data: bytes, size: int) -> bytes:
    """Pad ``data`` with zeros on the left to ``size`` bytes, keeping the tail if longer."""
    return _pad(data, size, True)


def right_pad(data: bytes, size: int) -> bytes:
    """Pad ``data`` with zeros on the right to ``size`` bytes, keeping the tail if longer."""
    return _pad(data, size, False)


def _parse_number(text: str) -> int:
    if _DECIMAL.fullmatch(text):
        return int(text, 10)
    digits = text[2:]
    if _HEXADECIMAL.fullmatch(digits):
        return int(digits, 16)
    raise _encode_error(text, "number")


def encode_number(value: Any) -> bytes:
    """Encode an integer, float or numeric string as a 256 bit two's complement word."""
    if isinstance(value, bool):
        raise _encode_error(value, "number")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        try:
            number = int(value)
        except (ValueError, OverflowError) as exc:
            raise _encode_error(value, "number") from exc
    elif isinstance(value, str):
        number = _parse_number(value)
    else:
        raise _encode_error(value, "number")
    return (number & _MASK).to_bytes(_WORD, "big")


def _pack_bytes(data: bytes) -> bytes:
    length = len(data)
    return encode_number(length) + right_pad(data, (length + 31) // 32 * 32)


def _as_bytes(value: Any, target: str) -> bytes:
    if isinstance(value, str):
        return decode_hex(value)
    if isinstance(value, _BYTES_LIKE):
        return bytes(value)
    if isinstance(value, (list, tuple)):
        try:
            return bytes(value)
        except (TypeError, ValueError) as exc:
            raise _encode_error(value, target) from exc
    raise _encode_error(value, target)


def _encode_sequence(value: Any, typ: Type) -> bytes:
    if not isinstance(value, (list, tuple)):
        raise _encode_error(value, str(typ.kind))
    if typ.kind is Kind.ARRAY and typ.size != len(value):
        raise AbiError("array len incompatible")

    head: list[bytes] = []
    tail: list[bytes] = []
    if typ.is_variable_input():
        head.append(encode_number(len(value)))

    dynamic = typ.elem.is_dynamic()
    offset = type_size(typ.elem) * len(value) if dynamic else 0
    for item in value:
        encoded = encode(item, typ.elem)
        if dynamic:
            head.append(encode_number(offset))
            tail.append(encoded)
            offset += len(encoded)
        else:
            head.append(encoded)
    return b"".join(head + tail)


def _mapping_from_dataclass(value: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for item in dataclasses.fields(value):
        if item.name.startswith("_"):
            continue
        tag = item.metadata.get("abi", "")
        if tag == "-":
            continue
        result.setdefault(tag or item.name.lower(), getattr(value, item.name))
    return result


def _encode_tuple(value: Any, typ: Type) -> bytes:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = _mapping_from_dataclass(value)
    if isinstance(value, Mapping):
        keyed = True
    elif isinstance(value, (list, tuple)):
        keyed = False
    else:
        raise _encode_error(value, "tuple")

    if len(value) < len(typ.elems):
        raise AbiError("expected at least the same length")

    offset = sum(type_size(item.elem) for item in typ.elems)
    head: list[bytes] = []
    tail: list[bytes] = []
    for index, item in enumerate(typ.elems):
        if keyed:
            key = item.name or str(index)
            if key not in value:
                raise AbiError(f"cannot get key {item.name}")
            member = value[key]
        else:
            member = value[index]

        encoded = encode(member, item.elem)
        if item.elem.is_dynamic():
            head.append(encode_number(offset))
            tail.append(encoded)
            offset += len(encoded)
        else:
            head.append(encoded)
    return b"".join(head + tail)


def _encode_string(value: Any, typ: Type) -> bytes:
    if not isinstance(value, str):
        raise _encode_error(value, "string")
    return _pack_bytes(value.encode("utf-8"))


def _encode_bool(value: Any, typ: Type) -> bytes:
    if not isinstance(value, bool):
        raise _encode_error(value, "bool")
    return left_pad(b"\x01" if value else b"", _WORD)


def _encode_address(value: Any, typ: Type) -> bytes:
    if isinstance(value, str):
        return left_pad(Address.from_hex(value), _WORD)
    return left_pad(_as_bytes(value, "address"), _WORD)


def _encode_number(value: Any, typ: Type) -> bytes:
    return encode_number(value)


def _encode_bytes(value: Any, typ: Type) -> bytes:
    return _pack_bytes(_as_bytes(value, "bytes"))


def _encode_fixed_bytes(value: Any, typ: Type) -> bytes:
    return right_pad(_as_bytes(value, str(typ.kind)), _WORD)


_ENCODERS: dict[Kind, Callable[[Any, Type], bytes]] = {
    Kind.SLICE: _encode_sequence,
    Kind.ARRAY: _encode_sequence,
    Kind.TUPLE: _encode_tuple,
    Kind.STRING: _encode_string,
    Kind.BOOL: _encode_bool,
    Kind.ADDRESS: _encode_address,
    Kind.INT: _encode_number,
    Kind.UINT: _encode_number,
    Kind.BYTES: _encode_bytes,
    Kind.FIXED_BYTES: _encode_fixed_bytes,
    Kind.FUNCTION: _encode_fixed_bytes,
}


def encode(value: Any, typ: Type) -> bytes:
    """Encode ``value`` according to the ABI type ``typ``."""
    encoder = _ENCODERS.get(typ.kind)
    if encoder is None:
        raise AbiError(f"encoding not available for type '{typ.kind}'")
    return encoder(value, typ)