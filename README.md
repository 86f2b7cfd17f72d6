# ethkit

A Python library for working with Ethereum contract data:

- parse Solidity ABI types such as `tuple(address a, uint256[] b)`
- encode values into ABI call data and decode results back
- load contract ABIs from JSON or from human-readable declarations
- parse event logs and indexed topics, and unpack revert reasons
- keep a window of recent blocks and handle chain reorganisations
- compute ENS name hashes
- look up method and event selectors in the 4byte signature directory

## Installation

```
pip install ethkit
```

Keccak-256 hashing comes from `pycryptodome`.

## Basic values

`ethkit.primitives` holds the shared value types. `Address` (20 bytes)
and `Hash` (32 bytes) are `bytes` subclasses with a `from_hex` class
method; `str(address)` gives the checksummed form, also available as
`Address.to_checksum()`. `Log` and `Block` are dataclasses.
`keccak256`, `encode_hex` and `decode_hex` are small helpers, and
`AbiError` (a `ValueError`) is raised for every malformed type, value
or payload.

## Types, encoding and decoding

```python
from ethkit.abitype import new_type
from ethkit.encoding import encode
from ethkit.decoding import decode

typ = new_type("tuple(string a, int32 b)")
data = encode({"a": "hello", "b": 2}, typ)
assert decode(typ, data) == {"a": "hello", "b": 2}
```

`new_type` parses the textual form into a `Type`; `Type.format(True)`
renders it back with element names. JSON ABI arguments are turned into
types with `Argument.from_dict` and `new_type_from_argument`, which
also keeps each `internalType`.

Encoding is lenient about the Python values it accepts: integers may be
given as `int`, `float`, decimal strings or `0x` hex strings; addresses,
`bytes` and `bytesN` values may be given as hex strings; tuples may be
dicts keyed by element name (or by position as `"0"`, `"1"`, ... for
unnamed elements), lists, or dataclass instances.

Decoding gives back `int` for numbers, `bool`, `str`, `bytes`,
`Address`, lists for arrays and slices, and dicts for tuples.
`decode_struct(typ, data, cls)` builds a dataclass from a decoded tuple;
a field can be mapped to another tuple element name with
`field(metadata={"abi": "name"})`, or skipped with `"-"`.

## Contract ABIs

```python
from ethkit.abi import new_abi_from_list

abi = new_abi_from_list([
    "function balanceOf(address owner) view returns (uint256 balance)",
    "event Transfer(address indexed from, address indexed to, uint256 value)",
])

method = abi.get_method("balanceOf")
print(method.sig())         # balanceOf(address)
print(method.id().hex())    # 4-byte selector
call_data = method.encode({"owner": "0x" + "11" * 20})
```

Full JSON ABIs load with `new_abi(text)` or `new_abi_from_stream(stream)`.
When a contract has overloaded methods or events, the second one is
stored under `name0`, the third under `name1`, and so on. Methods can
also be looked up with
`abi.get_method_by_signature("transfer(address,uint256)")`. Single
declarations are parsed with `new_method`, `new_event` and `new_error`.

## Events and reverts

`Event.id()` is the topic that identifies the event,
`Event.match(log)` tells whether a log came from it, and
`Event.parse_log(log)` returns its fields: indexed ones come from the
topics, the others from the log data. The lower-level functions
`parse_log`, `parse_topics`, `parse_topic` and `encode_topic` live in
`ethkit.topics`. `ethkit.revert.unpack_revert_error` returns the
message carried by a standard `Error(string)` revert payload.

## Block tracking

`ethkit.blocktracker.BlockTracker` keeps a window of recent blocks
(ten by default, set with `max_block_backlog`) from any object with
`get_block_by_number(number, full)` and `get_block_by_hash(hash, full)`
methods. `init()` fills the window from the latest block back.
Each block passed to `handle_reconcile` is merged into the window:
missing parents are fetched, forked blocks are rolled back, and every
queue returned by `subscribe()` receives a `BlockEvent` listing the
blocks added and removed (an event is dropped for a queue that still
holds the previous one). `start()` follows the head with a
`JSONBlockTracker`, which polls for the latest block, until `close()`
is called.

## ENS

```python
from ethkit.ens import name_hash

print(name_hash("foo.eth"))
```

`address_to_reverse_domain(address)` returns the `<hex>.addr.reverse`
name used for reverse lookups.

## Signature lookup

`ethkit.fourbyte.resolve("0xddf252ad")` asks the 4byte directory over
HTTPS for the text signature of a selector and returns an empty string
when none is known; `resolve_bytes` takes the selector as bytes.

## What is not included

ethkit does not talk to an Ethereum node. It has no JSON-RPC client,
no transaction signing or sending, no wallets, and no ready-made
contract bindings such as ERC-20 or an ENS resolver. The block tracker
and ENS helpers work with whatever provider object you supply.