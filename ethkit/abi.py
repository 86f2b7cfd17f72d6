"""Contract ABI descriptions: methods, events and errors."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import IO, Any, Callable

from .abitype import Argument, Type, new_tuple_type_from_args, new_type
from .decoding import decode
from .encoding import encode
from .primitives import AbiError, Hash, Log, keccak256
from .topics import parse_log


def _build_signature(name: str, typ: Type) -> str:
    types = ",".join(str(item.elem).replace("tuple", "") for item in typ.elems)
    return f"{name}({types})"


@dataclass
class Method:
    """A callable function of a contract."""

    name: str = ""
    inputs: Type | None = None
    outputs: Type | None = None
    const: bool = False

    def sig(self) -> str:
        """Return the canonical signature of the method."""
        return _build_signature(self.name, self.inputs)

    def id(self) -> bytes:
        """Return the four byte selector of the method."""
        return keccak256(self.sig().encode("utf-8"))[:4]

    def encode(self, args: Any) -> bytes:
        """Encode a call to this method with ``args``."""
        return self.id() + encode(args, self.inputs)

    def decode(self, data: bytes) -> dict[str, Any]:
        """Decode the output returned by this method."""
        if not data:
            raise AbiError("empty response")
        return decode(self.outputs, data)


@dataclass
class Event:
    """A log event of a contract."""

    name: str
    inputs: Type
    anonymous: bool = False

    def sig(self) -> str:
        """Return the canonical signature of the event."""
        return _build_signature(self.name, self.inputs)

    def id(self) -> Hash:
        """Return the topic that identifies this event in logs."""
        return Hash(keccak256(self.sig().encode("utf-8")))

    def match(self, log: Log) -> bool:
        """Whether ``log`` was emitted by this event."""
        return bool(log.topics) and log.topics[0] == self.id()

    def parse_log(self, log: Log) -> dict[str, Any]:
        """Decode ``log`` with this event."""
        if not self.match(log):
            raise AbiError("log does not match this event")
        return parse_log(self.inputs, log)


@dataclass
class Error:
    """A custom error of a contract."""

    name: str
    inputs: Type


def _overloaded_name(raw: str, taken: Callable[[str], bool]) -> str:
    name = raw
    index = 0
    while taken(name):
        name = f"{raw}{index}"
        index += 1
    return name


@dataclass
class ABI:
    """The interface description of a contract."""

    constructor: Method | None = None
    methods: dict[str, Method] = field(default_factory=dict)
    methods_by_signature: dict[str, Method] = field(default_factory=dict)
    events: dict[str, Event] = field(default_factory=dict)
    errors: dict[str, Error] = field(default_factory=dict)

    def get_method(self, name: str) -> Method | None:
        """Return the method registered under ``name``."""
        return self.methods.get(name)

    def get_method_by_signature(self, signature: str) -> Method | None:
        """Return the method with the canonical signature ``signature``."""
        return self.methods_by_signature.get(signature)

    def _add_method(self, method: Method) -> None:
        name = _overloaded_name(method.name, self.methods.__contains__)
        self.methods[name] = method
        self.methods_by_signature[method.sig()] = method

    def _add_event(self, event: Event) -> None:
        name = _overloaded_name(event.name, self.events.__contains__)
        self.events[name] = event

    def _add_error(self, error: Error) -> None:
        self.errors[error.name] = error


def _args(entries: Any) -> list[Argument]:
    return [Argument.from_dict(entry) for entry in entries or []]


def _add_entry(abi: ABI, entry: dict[str, Any]) -> None:
    fields = {str(key).lower(): value for key, value in entry.items()}
    kind = fields.get("type") or ""
    name = fields.get("name") or ""
    if kind == "constructor":
        if abi.constructor is not None:
            raise AbiError("multiple constructor declaration")
        abi.constructor = Method(inputs=new_tuple_type_from_args(_args(fields.get("inputs"))))
    elif kind in ("function", ""):
        const = bool(fields.get("constant")) or fields.get("statemutability") in ("view", "pure")
        abi._add_method(
            Method(
                name=name,
                inputs=new_tuple_type_from_args(_args(fields.get("inputs"))),
                outputs=new_tuple_type_from_args(_args(fields.get("outputs"))),
                const=const,
            )
        )
    elif kind == "event":
        abi._add_event(
            Event(
                name=name,
                inputs=new_tuple_type_from_args(_args(fields.get("inputs"))),
                anonymous=bool(fields.get("anonymous")),
            )
        )
    elif kind == "error":
        abi._add_error(Error(name, new_tuple_type_from_args(_args(fields.get("inputs")))))
    elif kind in ("fallback", "receive"):
        pass
    else:
        raise AbiError(f"unknown field type '{kind}'")


def new_abi(text: str | bytes) -> ABI:
    """Parse a JSON ABI description."""
    try:
        entries = json.loads(text)
    except ValueError as exc:
        raise AbiError(f"invalid abi json: {exc}") from exc
    if not isinstance(entries, list):
        raise AbiError("abi json must be a list")
    abi = ABI()
    for entry in entries:
        if not isinstance(entry, dict):
            raise AbiError("abi entries must be objects")
        _add_entry(abi, entry)
    return abi


def new_abi_from_stream(stream: IO[Any]) -> ABI:
    """Parse a JSON ABI description read from ``stream``."""
    return new_abi(stream.read())


_FUNC_WITH_RETURN = re.compile(r"(\w*)\s*\((.*)\)(.*)\s*returns\s*\((.*)\)", re.ASCII)
_FUNC_WITHOUT_RETURN = re.compile(r"(\w*)\s*\((.*)\)(.*)", re.ASCII)


def parse_method_signature(text: str) -> tuple[str, Type, Type]:
    """Split a human readable function into its name, input and output types."""
    text = text.replace("\n", " ").replace("\t", " ")
    if text.startswith("function "):
        text = text[len("function "):]
    text = text.strip()

    outputs = ""
    if "returns" in text:
        match = _FUNC_WITH_RETURN.search(text)
        if match is None:
            raise AbiError("no matches found")
        outputs = match.group(4).strip()
    else:
        match = _FUNC_WITHOUT_RETURN.search(text)
        if match is None:
            raise AbiError("no matches found")
    name = match.group(1).strip()
    inputs = match.group(2).strip()
    return name, new_type(f"tuple({inputs})"), new_type(f"tuple({outputs})")


def new_method(text: str) -> Method:
    """Build a method from a human readable signature."""
    name, inputs, outputs = parse_method_signature(text)
    return Method(name=name, inputs=inputs, outputs=outputs)


def _parse_event_or_error(prefix: str, text: str) -> tuple[str, Type]:
    if not text.startswith(prefix):
        raise AbiError(f"prefix '{prefix}' not found")
    text = text[len(prefix):]
    if not text.endswith(")"):
        raise AbiError("failed to parse input, expected 'name(types)'")
    index = text.find("(")
    if index == -1:
        raise AbiError("failed to parse input, expected 'name(types)'")
    return text[:index], new_type("tuple" + text[index:])


def new_event_from_type(name: str, typ: Type) -> Event:
    """Build an event from its name and input tuple type."""
    return Event(name=name, inputs=typ)


def new_event(text: str) -> Event:
    """Build an event from a human readable signature such as ``event A(uint256)``."""
    name, typ = _parse_event_or_error("event ", text)
    return new_event_from_type(name, typ)


def new_error(text: str) -> Error:
    """Build an error from a human readable signature such as ``error E(uint256)``."""
    name, typ = _parse_event_or_error("error ", text)
    return Error(name, typ)


def new_abi_from_list(items: list[str]) -> ABI:
    """Build an ABI from human readable declarations."""
    abi = ABI()
    for item in items:
        if item.startswith("constructor"):
            abi.constructor = Method(inputs=new_type("tuple" + item[len("constructor"):]))
        elif item.startswith("function "):
            abi._add_method(new_method(item))
        elif item.startswith("event "):
            abi._add_event(new_event(item))
        elif item.startswith("error "):
            abi._add_error(new_error(item))
        else:
            raise AbiError("either event or function expected")
    return abi