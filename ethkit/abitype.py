"""ABI type descriptions and the parser for their textual form."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from .primitives import AbiError


class Kind(enum.Enum):
    """The kind of an ABI type."""

    BOOL = "Bool"
    UINT = "Uint"
    INT = "Int"
    STRING = "String"
    ARRAY = "Array"
    SLICE = "Slice"
    ADDRESS = "Address"
    BYTES = "Bytes"
    FIXED_BYTES = "FixedBytes"
    FIXED_POINT = "FixedPoint"
    TUPLE = "Tuple"
    FUNCTION = "Function"

    def __str__(self) -> str:
        return self.value


@dataclass
class TupleElem:
    """A named element of a tuple type."""

    name: str
    elem: Type
    indexed: bool = False


@dataclass
class Type:
    """An ABI type."""

    kind: Kind
    size: int = 0
    elem: Type | None = None
    elems: list[TupleElem] = field(default_factory=list)
    internal_type: str = ""

    def __str__(self) -> str:
        return self.format(False)

    def format(self, include_args: bool) -> str:
        """Render the type, optionally with the names of tuple elements."""
        kind = self.kind
        if kind is Kind.TUPLE:
            parts = []
            for item in self.elems:
                text = item.elem.format(include_args)
                if item.indexed:
                    text += " indexed"
                if include_args and item.name:
                    text += " " + item.name
                parts.append(text)
            return f"tuple({','.join(parts)})"
        if kind is Kind.ARRAY:
            return f"{self.elem.format(include_args)}[{self.size}]"
        if kind is Kind.SLICE:
            return f"{self.elem.format(include_args)}[]"
        if kind is Kind.FIXED_BYTES:
            return f"bytes{self.size}"
        if kind is Kind.UINT:
            return f"uint{self.size}"
        if kind is Kind.INT:
            return f"int{self.size}"
        simple = {
            Kind.BYTES: "bytes",
            Kind.STRING: "string",
            Kind.BOOL: "bool",
            Kind.ADDRESS: "address",
            Kind.FUNCTION: "function",
        }
        if kind in simple:
            return simple[kind]
        raise AbiError(f"abi type not found {kind}")

    def is_variable_input(self) -> bool:
        """Whether the encoding starts with a length word."""
        return self.kind in (Kind.SLICE, Kind.BYTES, Kind.STRING)

    def is_dynamic(self) -> bool:
        """Whether the encoded size depends on the value."""
        if self.kind is Kind.TUPLE:
            return any(item.elem.is_dynamic() for item in self.elems)
        if self.kind in (Kind.STRING, Kind.BYTES, Kind.SLICE):
            return True
        return self.kind is Kind.ARRAY and self.elem.is_dynamic()


@dataclass
class Argument:
    """An argument entry of a JSON ABI description."""

    type: str
    name: str = ""
    indexed: bool = False
    components: list[Argument] = field(default_factory=list)
    internal_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Argument":
        """Build an argument from its JSON object."""
        return cls(
            type=data.get("type") or "",
            name=data.get("name") or "",
            indexed=bool(data.get("indexed", False)),
            components=[cls.from_dict(c) for c in data.get("components") or []],
            internal_type=data.get("internalType") or "",
        )


def new_tuple_type(elems: list[TupleElem]) -> Type:
    """Return a tuple type with the given elements."""
    return Type(Kind.TUPLE, elems=list(elems))


def new_tuple_type_from_args(args: list[Argument]) -> Type:
    """Return a tuple type built from a list of JSON ABI arguments."""
    return new_tuple_type(
        [TupleElem(arg.name, new_type_from_argument(arg), arg.indexed) for arg in args]
    )


def _argument_type_text(arg: Argument) -> str:
    if not arg.type.startswith("tuple"):
        return arg.type
    if not arg.components:
        return "tuple()"
    parts = []
    for comp in arg.components:
        text = _argument_type_text(comp)
        if comp.indexed:
            parts.append(f"{text} indexed {comp.name}")
        else:
            parts.append(f"{text} {comp.name}")
    return f"tuple({','.join(parts)}){arg.type[len('tuple'):]}"


def _fill_in(typ: Type, arg: Argument) -> None:
    typ.internal_type = arg.internal_type
    if not arg.components:
        return
    # tuples in slices or arrays show up as tuple[] or tuple[2]
    while typ.kind is not Kind.TUPLE:
        if typ.kind not in (Kind.ARRAY, Kind.SLICE):
            return
        typ = typ.elem
    if len(arg.components) != len(typ.elems):
        return
    for item, comp in zip(typ.elems, arg.components):
        _fill_in(item.elem, comp)


def new_type_from_argument(arg: Argument) -> Type:
    """Parse the type of a JSON ABI argument, keeping its internal types."""
    typ = new_type(_argument_type_text(arg))
    _fill_in(typ, arg)
    return typ


def type_size(typ: Type) -> int:
    """Return the size of the head section the type takes in an encoding."""
    if typ.kind is Kind.ARRAY and not typ.elem.is_dynamic():
        if typ.elem.kind in (Kind.ARRAY, Kind.TUPLE):
            return typ.size * type_size(typ.elem)
        return typ.size * 32
    if typ.kind is Kind.TUPLE and not typ.is_dynamic():
        return sum(type_size(item.elem) for item in typ.elems)
    return 32


class _Tok(enum.Enum):
    EOF = "eof"
    STR = "string"
    NUMBER = "number"
    TUPLE = "tuple"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    INDEXED = "indexed"
    INVALID = "<invalid>"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class _Token:
    kind: _Tok
    literal: str = ""


_EOF = _Token(_Tok.EOF)
_PUNCTUATION = {
    ",": _Tok.COMMA,
    "(": _Tok.LPAREN,
    ")": _Tok.RPAREN,
    "[": _Tok.LBRACKET,
    "]": _Tok.RBRACKET,
}
_WHITESPACE = " \t\n\r"


def _is_letter(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _tokenize(text: str) -> Iterator[_Token]:
    pos, end = 0, len(text)
    while True:
        while pos < end and text[pos] in _WHITESPACE:
            pos += 1
        if pos >= end:
            yield _EOF
            continue
        ch = text[pos]
        if ch in _PUNCTUATION:
            yield _Token(_PUNCTUATION[ch])
            pos += 1
        elif ch == "\0":
            yield _EOF
            pos += 1
        elif _is_letter(ch):
            start = pos
            while pos < end and (_is_letter(text[pos]) or _is_digit(text[pos])):
                pos += 1
            word = text[start:pos]
            if word == "tuple":
                yield _Token(_Tok.TUPLE, word)
            elif word == "indexed":
                yield _Token(_Tok.INDEXED, word)
            else:
                yield _Token(_Tok.STR, word)
        elif _is_digit(ch):
            start = pos
            while pos < end and _is_digit(text[pos]):
                pos += 1
            yield _Token(_Tok.NUMBER, text[start:pos])
        else:
            yield _Token(_Tok.INVALID)
            pos += 1


class _Lexer:
    def __init__(self, text: str) -> None:
        self._tokens = _tokenize(text)
        self.current = _EOF
        self.peek = next(self._tokens)

    def advance(self) -> _Token:
        self.current = self.peek
        self.peek = next(self._tokens)
        return self.current


def _expected(kind: _Tok) -> AbiError:
    return AbiError(f"expected token {kind}")


def _not_expected(kind: _Tok) -> AbiError:
    return AbiError(f"token '{kind}' not expected")


def _read_tuple(lex: _Lexer) -> Type:
    elems: list[TupleElem] = []
    while True:
        try:
            elem = _read_type(lex)
        except AbiError as exc:
            if lex.current.kind is _Tok.RPAREN and not elems:
                break  # empty tuple
            raise AbiError(f"failed to decode type: {exc}") from exc

        name = ""
        indexed = False
        if lex.peek.kind is _Tok.STR:
            name = lex.advance().literal
        elif lex.peek.kind is _Tok.INDEXED:
            lex.advance()
            indexed = True
            if lex.peek.kind is _Tok.STR:
                name = lex.advance().literal
        elems.append(TupleElem(name, elem, indexed))

        following = lex.advance()
        if following.kind is _Tok.COMMA:
            continue
        if following.kind is _Tok.RPAREN:
            break
        raise _not_expected(following.kind)
    return Type(Kind.TUPLE, elems=elems)


def _read_type(lex: _Lexer) -> Type:
    tok = lex.advance()
    if tok.kind is _Tok.TUPLE:
        if lex.advance().kind is not _Tok.LPAREN:
            raise _expected(_Tok.LPAREN)
        typ = _read_tuple(lex)
    elif tok.kind is _Tok.LPAREN:
        typ = _read_tuple(lex)
    elif tok.kind is not _Tok.STR:
        raise _expected(_Tok.STR)
    else:
        typ = _decode_simple_type(tok.literal)

    while lex.peek.kind is _Tok.LBRACKET:
        lex.advance()
        size_tok = lex.advance()
        if size_tok.kind is _Tok.RBRACKET:
            typ = Type(Kind.SLICE, elem=typ)
        elif size_tok.kind is _Tok.NUMBER:
            size = int(size_tok.literal)
            if size > 0xFFFFFFFF:
                raise AbiError(
                    f"failed to read array size '{size_tok.literal}': value out of range"
                )
            typ = Type(Kind.ARRAY, size=size, elem=typ)
            if lex.advance().kind is not _Tok.RBRACKET:
                raise _expected(_Tok.RBRACKET)
        else:
            raise _not_expected(size_tok.kind)
    return typ


_SIMPLE_TYPE = re.compile(r"^([A-Za-z]+)([0-9]*)$")


def _decode_simple_type(text: str) -> Type:
    match = _SIMPLE_TYPE.match(text)
    if match is None:
        raise AbiError(
            f"type format is incorrect. Expected 'type''bytes' but found '{text}'"
        )
    name, digits = match.groups()
    has_size = digits != ""
    size = int(digits) if has_size else 0

    if name in ("int", "uint"):
        if not has_size:
            size = 256
    elif name != "bytes" and has_size:
        raise AbiError(f"type {name} does not expect bytes")

    if name in ("int", "uint"):
        if size % 8 != 0:
            raise AbiError("number of bytes has to be M mod 8")
        return Type(Kind.UINT if name == "uint" else Kind.INT, size=size)
    if name == "byte":
        return Type(Kind.FIXED_BYTES, size=1)
    if name == "bytes":
        if size == 0:
            return Type(Kind.BYTES)
        return Type(Kind.FIXED_BYTES, size=size)
    if name == "string":
        return Type(Kind.STRING)
    if name == "bool":
        return Type(Kind.BOOL)
    if name == "address":
        return Type(Kind.ADDRESS, size=20)
    if name == "function":
        return Type(Kind.FUNCTION, size=24)
    raise AbiError(f"unknown type '{name}'")


def new_type(text: str) -> Type:
    """Parse a type from its textual form."""
    return _read_type(_Lexer(text))