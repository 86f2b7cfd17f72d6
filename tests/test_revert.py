import pytest

from ethkit.primitives import AbiError, decode_hex
from ethkit.revert import unpack_revert_error


def test_unpack_revert_error():
    data = (
        "08c379a0"
        "0000000000000000000000000000000000000000000000000000000000000020"
        "000000000000000000000000000000000000000000000000000000000000000d"
        "72657665727420726561736f6e00000000000000000000000000000000000000"
    )
    assert unpack_revert_error(decode_hex(data)) == "revert reason"


def test_missing_prefix():
    with pytest.raises(AbiError):
        unpack_revert_error(b"\x00\x00\x00\x00" + bytes(96))


def test_truncated_payload():
    with pytest.raises(AbiError):
        unpack_revert_error(bytes([0x08, 0xC3, 0x79, 0xA0]))