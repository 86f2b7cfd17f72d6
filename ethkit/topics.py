"""Parsing and encoding of indexed event log topics."""

from __future__ import annotations

from typing import Any

from .abitype import Kind, Type, new_tuple_type
from .decoding import decode, read_address, read_fixed_bytes, read_integer
from .encoding import encode
from .primitives import AbiError, Hash, Log

_TOPIC_TRUE = Hash(bytes(31) + b"\x01")
_TOPIC_FALSE = Hash()


def parse_log(typ: Type, log: Log) -> dict[str, Any]:
    """Decode the indexed topics and the data of ``log`` using the tuple type ``typ``."""
    if not log.topics:
        raise AbiError("log has no topics")
    indexed = [item for item in typ.elems if item.indexed]
    plain = [item for item in typ.elems if not item.indexed]

    indexed_values = iter(parse_topics(new_tuple_type(indexed), log.topics[1:]))
    plain_values: dict[str, Any] = {}
    if plain:
        decoded = decode(new_tuple_type(plain), log.data)
        if not isinstance(decoded, dict):
            raise AbiError("bad decoding")
        plain_values = decoded

    result: dict[str, Any] = {}
    for item in typ.elems:
        if item.indexed:
            result[item.name] = next(indexed_values)
        else:
            result[item.name] = plain_values.get(item.name)
    return result


def parse_topics(typ: Type, topics: list[Hash]) -> list[Any]:
    """Parse a list of topics, one for each element of the tuple type ``typ``."""
    if typ.kind is not Kind.TUPLE:
        raise AbiError("expected a tuple type")
    if len(typ.elems) != len(topics):
        raise AbiError("bad length")
    return [parse_topic(item.elem, topic) for item, topic in zip(typ.elems, topics)]


def parse_topic(typ: Type, topic: bytes) -> Any:
    """Parse a single topic holding a value of type ``typ``."""
    word = bytes(topic)
    kind = typ.kind
    if kind is Kind.BOOL:
        if word == _TOPIC_TRUE:
            return True
        if word == _TOPIC_FALSE:
            return False
        raise AbiError("is not a boolean")
    if kind in (Kind.INT, Kind.UINT):
        return read_integer(typ, word)
    if kind is Kind.ADDRESS:
        return read_address(word)
    if kind is Kind.FIXED_BYTES:
        return read_fixed_bytes(typ, word)
    raise AbiError(f"topic parsing for type {typ} not supported")


def encode_topic(typ: Type, value: Any) -> Hash:
    """Encode ``value`` of type ``typ`` as a topic."""
    kind = typ.kind
    if kind is Kind.BOOL:
        if not isinstance(value, bool):
            raise AbiError(f"failed to encode {type(value).__name__} as bool")
        return _TOPIC_TRUE if value else _TOPIC_FALSE
    if kind in (Kind.INT, Kind.UINT, Kind.ADDRESS):
        return Hash(encode(value, typ))
    raise AbiError("not found")