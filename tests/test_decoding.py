import dataclasses

import pytest

from ethkit.abitype import new_type
from ethkit.decoding import (
    decode,
    decode_struct,
    read_address,
    read_fixed_bytes,
    read_integer,
)
from ethkit.encoding import encode
from ethkit.primitives import AbiError, Address, decode_hex


def test_bytes_bound():
    with pytest.raises(AbiError, match="empty input"):
        decode(new_type("tuple(string)"), b"")


def test_dynamic_length_out_of_bounds():
    data = (
        b"00000000000000000000000000000000"
        + bytes(31)
        + b" "
        + b"00000000000000000000000000"
    )
    with pytest.raises(AbiError):
        decode(new_type("tuple(bytes32, bytes, bytes)"), data)


def test_short_input():
    with pytest.raises(AbiError, match="incorrect length"):
        decode(new_type("uint256"), b"\x01")


def test_decode_uint256():
    assert decode(new_type("uint256"), bytes(31) + b"\x05") == 5


def test_decode_min_int256():
    assert decode(new_type("int256"), b"\x80" + bytes(31)) == -(1 << 255)


def test_decode_unnamed_tuple_keys():
    data = bytes(31) + b"\x01" + bytes(31) + b"\x02"
    assert decode(new_type("tuple(uint8, uint8)"), data) == {"0": 1, "1": 2}


def test_repeated_tuple_names():
    data = bytes(31) + b"\x01" + bytes(31) + b"\x02"
    with pytest.raises(AbiError, match="tuple with repeated values"):
        decode(new_type("tuple(uint8 a, uint8 a)"), data)


def test_bad_boolean():
    with pytest.raises(AbiError, match="bad boolean"):
        decode(new_type("bool"), bytes(31) + b"\x02")


def test_decode_bool_values():
    typ = new_type("bool")
    assert decode(typ, bytes(31) + b"\x01") is True
    assert decode(typ, bytes(32)) is False


def test_function_type():
    typ = new_type("function")
    word = bytes(range(1, 25)) + bytes(8)
    assert decode(typ, word) == bytes(range(1, 25))
    with pytest.raises(AbiError, match="last 8 bytes"):
        decode(typ, bytes(31) + b"\x01")


def test_revert_string():
    data = decode_hex(
        "0000000000000000000000000000000000000000000000000000000000000020"
        "000000000000000000000000000000000000000000000000000000000000000d"
        "72657665727420726561736f6e00000000000000000000000000000000000000"
    )
    assert decode(new_type("tuple(string)"), data) == {"0": "revert reason"}


def test_offset_out_of_range():
    data = bytes(31) + b"\x60" + bytes(32)
    with pytest.raises(AbiError, match="offset insufficient"):
        decode(new_type("tuple(string)"), data)


def test_huge_offset():
    data = b"\xff" * 32 + bytes(32)
    with pytest.raises(AbiError, match="offset larger than int64"):
        decode(new_type("tuple(string)"), data)


def test_length_out_of_range():
    data = bytes(31) + b"\x40" + b"abc" + bytes(29)
    with pytest.raises(AbiError, match="length insufficient"):
        decode(new_type("string"), data)


def test_slice_too_big():
    data = bytes(31) + b"\x01" + bytes(32)
    with pytest.raises(AbiError):
        decode(new_type("uint256[][]"), bytes(31) + b"\x03" + data)


def test_read_integer_small_types():
    word = bytes(31) + b"\xff"
    assert read_integer(new_type("int8"), word) == -1
    assert read_integer(new_type("uint8"), word) == 255
    assert read_integer(new_type("int64"), bytes(24) + b"\xff" * 8) == -1
    assert read_integer(new_type("uint16"), bytes(30) + b"\x01\x00") == 256


def test_read_integer_big_types():
    word = b"\xff" * 32
    assert read_integer(new_type("int256"), word) == -1
    assert read_integer(new_type("uint256"), word) == (1 << 256) - 1
    assert read_integer(new_type("int40"), word) == -1


def test_read_address():
    word = bytes(12) + b"\x01" + bytes(19)
    assert read_address(word) == Address(b"\x01" + bytes(19))
    with pytest.raises(AbiError, match="len is not correct"):
        read_address(bytes(31))


def test_read_fixed_bytes():
    word = b"\x01\x02\x03" + bytes(29)
    assert read_fixed_bytes(new_type("bytes3"), word) == b"\x01\x02\x03"


@dataclasses.dataclass
class _Obj:
    a: Address = dataclasses.field(metadata={"abi": "aa"})
    b: int = 0


@dataclasses.dataclass
class _CamelObj:
    a: Address = dataclasses.field(metadata={"abi": "aA"})
    b: int = 0


def test_encoding_struct():
    typ = new_type("tuple(address aa, uint256 b)")
    obj = _Obj(Address(b"\x01" + bytes(19)), 1)
    assert decode_struct(typ, encode(obj, typ), _Obj) == obj


def test_encoding_struct_camel_case():
    typ = new_type("tuple(address aA, uint256 b)")
    obj = _CamelObj(Address(b"\x01" + bytes(19)), 1)
    assert decode_struct(typ, encode(obj, typ), _CamelObj) == obj


def test_decode_struct_case_insensitive_field():
    typ = new_type("tuple(uint256 B, address aa)")
    data = bytes(31) + b"\x09" + bytes(12) + b"\x02" + bytes(19)
    assert decode_struct(typ, data, _Obj) == _Obj(Address(b"\x02" + bytes(19)), 9)


def test_decode_struct_requires_dataclass():
    with pytest.raises(AbiError, match="dataclass"):
        decode_struct(new_type("tuple(uint8 a)"), bytes(32), dict)


def test_decode_struct_requires_tuple():
    with pytest.raises(AbiError, match="tuple"):
        decode_struct(new_type("uint8"), bytes(32), _Obj)