import pytest

from ethkit.abitype import new_type
from ethkit.encoding import encode_number, right_pad
from ethkit.primitives import AbiError, Address, Hash, Log, keccak256
from ethkit.topics import encode_topic, parse_log, parse_topic, parse_topics


@pytest.mark.parametrize(
    "type_text, value",
    [
        ("bool", True),
        ("bool", False),
        ("uint64", 20),
        ("uint256", 1000000),
        ("address", Address(b"\x01" + bytes(19))),
        ("int256", -1),
    ],
)
def test_topic_round_trip(type_text, value):
    typ = new_type(type_text)
    topic = encode_topic(typ, value)
    assert parse_topic(typ, topic) == value


def test_bool_topic_values():
    typ = new_type("bool")
    assert encode_topic(typ, True) == Hash(bytes(31) + b"\x01")
    assert encode_topic(typ, False) == Hash()


def test_parse_bad_boolean():
    with pytest.raises(AbiError):
        parse_topic(new_type("bool"), Hash(bytes(31) + b"\x02"))


def test_parse_unsupported_type():
    with pytest.raises(AbiError):
        parse_topic(new_type("string"), Hash())


def test_encode_unsupported_type():
    with pytest.raises(AbiError):
        encode_topic(new_type("string"), "abc")


def test_encode_bool_requires_bool():
    with pytest.raises(AbiError):
        encode_topic(new_type("bool"), 1)


def test_parse_topics_checks_length_and_kind():
    with pytest.raises(AbiError):
        parse_topics(new_type("tuple(uint8 a)"), [])
    with pytest.raises(AbiError):
        parse_topics(new_type("uint8"), [Hash()])


def test_parse_log_uint():
    typ = new_type("tuple(uint32 val_0, uint8 indexed val_1)")
    log = Log(
        topics=[Hash(keccak256(b"A(uint32,uint8)")), encode_topic(new_type("uint8"), 10)],
        data=encode_number(1),
    )
    assert parse_log(typ, log) == {"val_0": 1, "val_1": 10}


def test_parse_log_fixed_bytes():
    typ = new_type("tuple(bytes1 val_0, bytes1 indexed val_1)")
    log = Log(
        topics=[Hash(keccak256(b"A(bytes1,bytes1)")), Hash(b"\x01" + bytes(31))],
        data=right_pad(b"\x01", 32),
    )
    assert parse_log(typ, log) == {"val_0": b"\x01", "val_1": b"\x01"}


def test_parse_log_without_topics():
    with pytest.raises(AbiError):
        parse_log(new_type("tuple(uint8 a)"), Log())