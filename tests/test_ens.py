import pytest

from ethkit.ens import address_to_reverse_domain, name_hash
from ethkit.primitives import Address, Hash


@pytest.mark.parametrize(
    "name,expected",
    [
        ("eth", "0x93cdeb708b7545dc668eb9280176169d1c33cfd8ed6f04690a0bcc88a93fc4ae"),
        ("foo.eth", "0xde9b09fd7c5f901e23a3f19fecc54828e9c848539801e86591bd9801b019f84f"),
    ],
)
def test_name_hash(name, expected):
    assert str(name_hash(name)) == expected


def test_name_hash_empty_is_zero():
    assert name_hash("") == Hash()


def test_reverse_domain():
    address = Address.from_hex("0xdbb881a51CD4023E4400CEF3ef73046743f08da3")
    assert address_to_reverse_domain(address) == (
        "dbb881a51cd4023e4400cef3ef73046743f08da3.addr.reverse"
    )