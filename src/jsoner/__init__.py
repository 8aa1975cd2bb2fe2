"""
JSON text engine: tokenizer, explicit-stack deserializer, policy-driven
serializer and a token-level pretty-printer.

Deserialization never recurses, so nesting depth is limited by memory rather
than the interpreter's call stack. String-based convenience wrappers are
lenient and substitute defaults instead of raising; stream-based entry points
always raise JSONParseError.
"""

import array
import io
import logging
import math
import warnings
from collections.abc import Collection
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import IO
from typing import Any

from ._containers import Char
from ._containers import JsonArray
from ._containers import JsonObject
from ._containers import Jsonable
from ._errors import JSONParseError
from ._errors import Position
from ._errors import Problem
from ._lexer import JsonLexer
from ._lexer import JsonToken
from ._lexer import TokenKind
from ._profiling import HotPathStats
from ._profiling import ProfileContext
from ._profiling import clear_hot_path_stats
from ._profiling import format_hot_path_stats
from ._profiling import get_hot_path_stats

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Recursive definition of what deserialization can produce
JsonValue = (
    str | int | float | bool | None | dict[str, "JsonValue"] | list["JsonValue"]
)
# Anything the careless serializer will accept
JsonValueLoose = Any

_CHAR_TYPECODES = frozenset("uw")
_NO_DEFAULT: Any = object()
_EXHAUSTED: Any = object()


class ParseState(Enum):
    """States of the deserializer's continuation stack."""

    INITIAL = "initial"
    DONE = "done"
    PARSED_ERROR = "parsed_error"
    PARSING_ARRAY = "parsing_array"
    PARSING_OBJECT = "parsing_object"
    PARSING_ENTRY = "parsing_entry"


@dataclass(frozen=True)
class DeserializeConfig:
    """
    Root-kind policy for one deserialization.

    Chooses which kinds of value may appear at the top level and whether
    several root values may follow each other in one input.
    """

    allow_objects: bool = True
    allow_arrays: bool = True
    allow_data: bool = True
    allow_concatenated: bool = False

    def __post_init__(self) -> None:
        for name in (
            "allow_objects",
            "allow_arrays",
            "allow_data",
            "allow_concatenated",
        ):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be a boolean")


@dataclass(frozen=True)
class SerializeConfig:
    """
    Strictness policy for one serialization.

    allow_jsonables defers to values implementing Jsonable; allow_invalids
    writes str() of anything unsupported, giving up on valid output.
    """

    allow_jsonables: bool = True
    allow_invalids: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.allow_jsonables, bool):
            raise TypeError("allow_jsonables must be a boolean")
        if not isinstance(self.allow_invalids, bool):
            raise TypeError("allow_invalids must be a boolean")


DESERIALIZE_ANY = DeserializeConfig()
DESERIALIZE_ARRAYS = DeserializeConfig(allow_objects=False, allow_data=False)
DESERIALIZE_OBJECTS = DeserializeConfig(allow_arrays=False, allow_data=False)
DESERIALIZE_MANY = DeserializeConfig(allow_concatenated=True)

SERIALIZE_STRICT = SerializeConfig(allow_jsonables=False)
SERIALIZE_DEFAULT = SerializeConfig()
SERIALIZE_CARELESS = SerializeConfig(allow_invalids=True)


def _open_root(
    token: JsonToken,
    lexer: JsonLexer,
    config: DeserializeConfig,
    state_stack: list[ParseState],
    value_stack: list[Any],
) -> None:
    """Starts a new root value, honouring the root-kind policy."""
    if token.kind is TokenKind.DATUM:
        allowed, value, state = config.allow_data, token.value, ParseState.DONE
    elif token.kind is TokenKind.LEFT_BRACE:
        allowed, value, state = (
            config.allow_objects,
            JsonObject(),
            ParseState.PARSING_OBJECT,
        )
    elif token.kind is TokenKind.LEFT_SQUARE:
        allowed, value, state = (
            config.allow_arrays,
            JsonArray(),
            ParseState.PARSING_ARRAY,
        )
    else:
        raise lexer.error(Problem.UNEXPECTED_TOKEN, token, at_token=True)

    if not allowed:
        raise lexer.error(Problem.DISALLOWED_TOKEN, token, at_token=True)
    value_stack.append(value)
    state_stack.append(state)


def _new_container(token: JsonToken) -> tuple[Any, ParseState] | None:
    if token.kind is TokenKind.LEFT_BRACE:
        return JsonObject(), ParseState.PARSING_OBJECT
    if token.kind is TokenKind.LEFT_SQUARE:
        return JsonArray(), ParseState.PARSING_ARRAY
    return None


def _close_container(
    state_stack: list[ParseState], value_stack: list[Any], return_count: int
) -> None:
    """Finishes the innermost container, or the root when none remain."""
    if len(value_stack) > return_count:
        value_stack.pop()
    else:
        state_stack.append(ParseState.DONE)


def deserialize_stream(
    reader: IO[str], config: DeserializeConfig = DESERIALIZE_ANY
) -> JsonArray:
    """
    Deserializes every root value in `reader` according to `config`.

    Drives the lexer through a state stack and a value stack instead of
    recursion. Returns a JsonArray of the root values read (exactly one
    unless concatenated values are allowed). Raises JSONParseError on any
    grammar or policy violation. The reader is left open.
    """
    with ProfileContext("deserialize_stream") as profile:
        lexer = JsonLexer(reader)
        state_stack: list[ParseState] = [ParseState.INITIAL]
        value_stack: list[Any] = []
        return_count = 1

        while True:
            state = state_stack.pop() if state_stack else ParseState.PARSED_ERROR
            token = lexer.next_token()
            kind = token.kind

            if state is ParseState.DONE:
                if kind is TokenKind.END:
                    break
                if not config.allow_concatenated:
                    raise lexer.error(
                        Problem.UNEXPECTED_TOKEN, token, at_token=True
                    )
                return_count += 1
                state = ParseState.INITIAL

            if state is ParseState.INITIAL:
                _open_root(token, lexer, config, state_stack, value_stack)

            elif state is ParseState.PARSING_ARRAY:
                if kind is TokenKind.COMMA:
                    state_stack.append(state)
                elif kind is TokenKind.DATUM:
                    value_stack[-1].append(token.value)
                    state_stack.append(state)
                elif kind is TokenKind.RIGHT_SQUARE:
                    _close_container(state_stack, value_stack, return_count)
                elif nested := _new_container(token):
                    container, nested_state = nested
                    value_stack[-1].append(container)
                    value_stack.append(container)
                    state_stack.append(state)
                    state_stack.append(nested_state)
                else:
                    raise lexer.error(
                        Problem.UNEXPECTED_TOKEN, token, at_token=True
                    )

            elif state is ParseState.PARSING_OBJECT:
                if kind is TokenKind.COMMA:
                    state_stack.append(state)
                elif kind is TokenKind.DATUM and isinstance(token.value, str):
                    value_stack.append(token.value)
                    state_stack.append(state)
                    state_stack.append(ParseState.PARSING_ENTRY)
                elif kind is TokenKind.RIGHT_BRACE:
                    _close_container(state_stack, value_stack, return_count)
                else:
                    raise lexer.error(
                        Problem.UNEXPECTED_TOKEN, token, at_token=True
                    )

            elif state is ParseState.PARSING_ENTRY:
                if kind is TokenKind.COLON:
                    state_stack.append(state)
                elif kind is TokenKind.DATUM:
                    key = value_stack.pop()
                    value_stack[-1][key] = token.value
                elif nested := _new_container(token):
                    container, nested_state = nested
                    key = value_stack.pop()
                    value_stack[-1][key] = container
                    value_stack.append(container)
                    state_stack.append(nested_state)
                else:
                    raise lexer.error(
                        Problem.UNEXPECTED_TOKEN, token, at_token=True
                    )

            else:
                # The state stack ran dry before the input did.
                raise lexer.error(Problem.UNEXPECTED_TOKEN, token, at_token=True)

        profile.chars = lexer.pos
        return JsonArray(value_stack)


def deserialize(source: str | IO[str] | None, default: Any = _NO_DEFAULT) -> Any:
    """
    Deserializes JSON from a string or a readable stream.

    Readers are parsed fully (any root kind) and errors propagate. Strings
    not wrapped in braces after trimming are returned unchanged without
    being parsed; brace-wrapped strings are parsed and errors propagate.
    None gives None.

    Passing a default selects a lenient, typed variant: a list default
    behaves like deserialize_array and a mapping default like
    deserialize_object.
    """
    if default is not _NO_DEFAULT:
        if isinstance(default, list):
            return deserialize_array(source, default)
        if isinstance(default, Mapping):
            return deserialize_object(source, default)
        raise TypeError(
            f"default must be a list or a mapping, not {type(default).__name__}"
        )

    if source is None:
        return None
    if hasattr(source, "read"):
        return deserialize_stream(source)[0]  # type: ignore[arg-type]
    if not isinstance(source, str):
        raise TypeError(
            f"the JSON source must be str or a text stream, not {type(source).__name__}"
        )

    trimmed = source.strip()
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        return source

    with io.StringIO(source) as reader:
        return deserialize_stream(reader)[0]


def _deserialize_lenient(
    source: str | IO[str] | None, config: DeserializeConfig, default: Any
) -> Any:
    if source is None:
        return default
    try:
        if hasattr(source, "read"):
            return deserialize_stream(source, config)[0]  # type: ignore[arg-type]
        with io.StringIO(source) as reader:
            return deserialize_stream(reader, config)[0]
    except (JSONParseError, TypeError) as exc:
        logger.debug("Falling back to default after parse failure: %s", exc)
        return default


def deserialize_array(
    source: str | IO[str] | None, default: list[Any] | None = None
) -> JsonArray | list[Any] | None:
    """Parses `source` as a JSON array, returning `default` on any failure."""
    return _deserialize_lenient(source, DESERIALIZE_ARRAYS, default)


def deserialize_object(
    source: str | IO[str] | None, default: Mapping[str, Any] | None = None
) -> JsonObject | Mapping[str, Any] | None:
    """Parses `source` as a JSON object, returning `default` on any failure."""
    return _deserialize_lenient(source, DESERIALIZE_OBJECTS, default)


def deserialize_many(source: str | IO[str]) -> JsonArray:
    """
    Deserializes concatenated root values, e.g. "nulltrue123".

    Two numbers must not touch each other: "12" followed by "3" reads as 123.
    """
    if isinstance(source, str):
        with io.StringIO(source) as reader:
            return deserialize_stream(reader, DESERIALIZE_MANY)
    return deserialize_stream(source, DESERIALIZE_MANY)


def parse(source: str | IO[str] | None) -> Any:
    """Deprecated alias of deserialize()."""
    warnings.warn(
        "parse() is deprecated, use deserialize() instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return deserialize(source)


def escape(text: str) -> str:
    """
    Escapes `text` for use inside a JSON string literal.

    Quotes, backslashes and the usual control shorthands get two-character
    escapes; other control characters and the U+007F-U+009F and
    U+2000-U+20FF ranges become upper-case \\uXXXX.
    """
    result = []
    for char in text:
        if char == '"':
            result.append('\\"')
        elif char == "\\":
            result.append("\\\\")
        elif char == "\b":
            result.append("\\b")
        elif char == "\f":
            result.append("\\f")
        elif char == "\n":
            result.append("\\n")
        elif char == "\r":
            result.append("\\r")
        elif char == "\t":
            result.append("\\t")
        elif (
            char <= "\u001f"
            or "\u007f" <= char <= "\u009f"
            or "\u2000" <= char <= "\u20ff"
        ):
            result.append(f"\\u{ord(char):04X}")
        else:
            result.append(char)
    return "".join(result)


def _key_string(key: Any) -> str:
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    # str() also turns Char keys into plain strings, so they stay quoted.
    return str(key)


class _OpenContainer:
    """A mapping or collection whose members are still being written."""

    __slots__ = ("container", "members", "is_mapping", "index", "key")

    def __init__(self, container: Any, is_mapping: bool) -> None:
        self.container = container
        self.members = iter(container.items()) if is_mapping else iter(container)
        self.is_mapping = is_mapping
        self.index = -1
        self.key: Any = None

    def describe(self) -> str:
        if self.is_mapping:
            return f"while serializing the value of key {self.key!r}"
        return (
            f"while serializing item {self.index} of a "
            f"{type(self.container).__name__}"
        )


def _serialize_chars(chars: array.array, writer: IO[str]) -> None:
    # Each character becomes its own one-character string.
    writer.write('["')
    writer.write('","'.join(escape(char) for char in chars))
    writer.write('"]')


def _write_or_open(  # noqa: PLR0912
    value: JsonValueLoose, writer: IO[str], config: SerializeConfig
) -> _OpenContainer | None:
    """
    Writes `value` if it is a leaf. Containers only get their opening
    bracket written and are returned for the caller to fill in.
    """
    if value is None:
        writer.write("null")
    elif config.allow_jsonables and isinstance(value, Jsonable):
        value.to_json(writer)
    elif isinstance(value, Char):
        writer.write(escape(value))
    elif isinstance(value, str):
        writer.write('"')
        writer.write(escape(value))
        writer.write('"')
    elif isinstance(value, bool):
        writer.write("true" if value else "false")
    elif isinstance(value, float):
        # JSON has no literal for NaN or the infinities
        if math.isnan(value) or math.isinf(value):
            writer.write("null")
        else:
            writer.write(repr(value))
    elif isinstance(value, Decimal):
        writer.write(str(value) if value.is_finite() else "null")
    elif isinstance(value, int):
        writer.write(str(value))
    elif isinstance(value, Mapping):
        writer.write("{")
        return _OpenContainer(value, is_mapping=True)
    elif isinstance(value, array.array) and value.typecode in _CHAR_TYPECODES:
        _serialize_chars(value, writer)
    elif isinstance(value, Collection):
        writer.write("[")
        return _OpenContainer(value, is_mapping=False)
    elif config.allow_invalids:
        writer.write(str(value))
    else:
        msg = (
            f"Object of type {type(value).__name__} is not JSON serializable; "
            "implement Jsonable, convert it to a JSON type first, or use "
            "serialize_carelessly() for debugging output"
        )
        raise TypeError(msg)
    return None


def _serialize_value(
    value: JsonValueLoose, writer: IO[str], config: SerializeConfig
) -> None:
    """
    Writes the JSON form of `value`, dispatching on its runtime type.

    Nested containers are walked with an explicit stack of open containers,
    so nesting depth is bounded by memory and not by the recursion limit.
    A TypeError raised below the root gets one note per enclosing container,
    innermost first.
    """
    opened = _write_or_open(value, writer, config)
    if opened is None:
        return

    stack = [opened]
    try:
        while stack:
            top = stack[-1]
            member = next(top.members, _EXHAUSTED)
            if member is _EXHAUSTED:
                writer.write("}" if top.is_mapping else "]")
                stack.pop()
                continue

            top.index += 1
            if top.index:
                writer.write(",")
            if top.is_mapping:
                top.key, member = member
                writer.write('"')
                writer.write(escape(_key_string(top.key)))
                writer.write('":')

            nested = _write_or_open(member, writer, config)
            if nested is not None:
                stack.append(nested)
    except TypeError as exc:
        for container in reversed(stack):
            exc.add_note(container.describe())
        raise


def _serialize_with(
    value: JsonValueLoose, writer: IO[str] | None, config: SerializeConfig
) -> str | None:
    with ProfileContext("serialize") as profile:
        if writer is not None:
            if not hasattr(writer, "write"):
                raise TypeError("writer must have a write() method")
            _serialize_value(value, writer, config)
            return None

        buffer = io.StringIO()
        _serialize_value(value, buffer, config)
        text = buffer.getvalue()
        profile.chars = len(text)
        return text


def serialize(value: JsonValueLoose, writer: IO[str] | None = None) -> str | None:
    """
    Serializes `value` to JSON, deferring to Jsonable implementations.

    Returns the text, or writes it to `writer` (left open) and returns None.
    Raises TypeError for values JSON cannot represent.
    """
    return _serialize_with(value, writer, SERIALIZE_DEFAULT)


def serialize_strictly(
    value: JsonValueLoose, writer: IO[str] | None = None
) -> str | None:
    """Like serialize(), but Jsonable implementations are not consulted."""
    return _serialize_with(value, writer, SERIALIZE_STRICT)


def serialize_carelessly(
    value: JsonValueLoose, writer: IO[str] | None = None
) -> str | None:
    """
    Like serialize(), but writes str() of unsupported values.

    Useful for log lines and debugging; the output may not be valid JSON.
    """
    return _serialize_with(value, writer, SERIALIZE_CARELESS)


def pretty_print_to(
    reader: IO[str], writer: IO[str], indent: str = "\t", newline: str = "\n"
) -> None:
    """
    Re-lexes JSON from `reader` and writes it to `writer` with line breaks.

    Works token by token without building values, so it formats whatever
    the lexer accepts. Raises JSONParseError if lexing fails; neither stream
    is closed.
    """
    with ProfileContext("pretty_print") as profile:
        lexer = JsonLexer(reader)
        level = 0
        while True:
            token = lexer.next_token()
            kind = token.kind
            if kind is TokenKind.END:
                profile.chars = lexer.pos
                break
            if kind is TokenKind.COLON:
                writer.write(": ")
            elif kind is TokenKind.COMMA:
                writer.write("," + newline + indent * level)
            elif kind in (TokenKind.LEFT_BRACE, TokenKind.LEFT_SQUARE):
                level += 1
                writer.write(kind.value + newline + indent * level)
            elif kind in (TokenKind.RIGHT_BRACE, TokenKind.RIGHT_SQUARE):
                level -= 1
                writer.write(newline + indent * level + kind.value)
            else:
                _serialize_value(token.value, writer, SERIALIZE_STRICT)


def pretty_print(text: str, indent: str = "\t", newline: str = "\n") -> str:
    """Pretty-prints JSON text; returns "" if the text cannot be lexed."""
    try:
        with io.StringIO(text) as reader, io.StringIO() as writer:
            pretty_print_to(reader, writer, indent, newline)
            return writer.getvalue()
    except (JSONParseError, TypeError) as exc:
        logger.debug("Could not pretty print JSON text: %s", exc)
        return ""


__all__ = [
    "DESERIALIZE_ANY",
    "DESERIALIZE_ARRAYS",
    "DESERIALIZE_MANY",
    "DESERIALIZE_OBJECTS",
    "SERIALIZE_CARELESS",
    "SERIALIZE_DEFAULT",
    "SERIALIZE_STRICT",
    "Char",
    "DeserializeConfig",
    "HotPathStats",
    "JSONParseError",
    "JsonArray",
    "JsonLexer",
    "JsonObject",
    "JsonToken",
    "Jsonable",
    "ParseState",
    "Position",
    "Problem",
    "SerializeConfig",
    "TokenKind",
    "clear_hot_path_stats",
    "deserialize",
    "deserialize_array",
    "deserialize_many",
    "deserialize_object",
    "deserialize_stream",
    "escape",
    "format_hot_path_stats",
    "get_hot_path_stats",
    "parse",
    "pretty_print",
    "pretty_print_to",
    "serialize",
    "serialize_carelessly",
    "serialize_strictly",
]
