"""
Value containers produced by deserialization and consumed by serialization.

JsonObject and JsonArray are plain dict/list subclasses with typed accessors
for callers probing stored payloads. Jsonable is the extension point a
foreign type implements to render itself, and Char marks a single character
that the serializer emits without surrounding quotes.
"""

from typing import IO
from typing import Any
from typing import Protocol
from typing import runtime_checkable

_MISSING: Any = object()


@runtime_checkable
class Jsonable(Protocol):
    """Implemented by types that write their own JSON representation."""

    def to_json(self, writer: IO[str]) -> None: ...


class Char(str):
    """A single character, serialized escaped but without quotes."""

    __slots__ = ()

    def __new__(cls, value: str) -> "Char":
        if not isinstance(value, str) or len(value) != 1:
            raise ValueError("Char requires exactly one character")
        return super().__new__(cls, value)


def _expect(value: Any, kinds: type | tuple[type, ...], name: str) -> Any:
    """Passes None and values of `kinds` through, rejects anything else."""
    if value is None or isinstance(value, kinds):
        return value
    raise TypeError(f"expected {name}, found {type(value).__name__}")


def _expect_number(value: Any, kinds: type | tuple[type, ...], name: str) -> Any:
    if isinstance(value, bool):
        raise TypeError(f"expected {name}, found bool")
    return _expect(value, kinds, name)


class JsonObject(dict[str, Any]):
    """Ordered JSON object; keys keep insertion order."""

    def _lookup(self, key: str, default: Any) -> Any:
        if default is _MISSING:
            return self[key]
        return self.get(key, default)

    def get_object(self, key: str, default: Any = _MISSING) -> "JsonObject | None":
        return _expect(self._lookup(key, default), dict, "object")

    def get_array(self, key: str, default: Any = _MISSING) -> "JsonArray | None":
        return _expect(self._lookup(key, default), list, "array")

    def get_string(self, key: str, default: Any = _MISSING) -> str | None:
        return _expect(self._lookup(key, default), str, "string")

    def get_integer(self, key: str, default: Any = _MISSING) -> int | None:
        return _expect_number(self._lookup(key, default), int, "integer")

    def get_float(self, key: str, default: Any = _MISSING) -> float | None:
        value = _expect_number(self._lookup(key, default), (int, float), "number")
        return None if value is None else float(value)

    def get_boolean(self, key: str, default: Any = _MISSING) -> bool | None:
        return _expect(self._lookup(key, default), bool, "boolean")


class JsonArray(list[Any]):
    """Ordered JSON array."""

    def get_object(self, index: int) -> JsonObject | None:
        return _expect(self[index], dict, "object")

    def get_array(self, index: int) -> "JsonArray | None":
        return _expect(self[index], list, "array")

    def get_string(self, index: int) -> str | None:
        return _expect(self[index], str, "string")

    def get_integer(self, index: int) -> int | None:
        return _expect_number(self[index], int, "integer")

    def get_float(self, index: int) -> float | None:
        value = _expect_number(self[index], (int, float), "number")
        return None if value is None else float(value)

    def get_boolean(self, index: int) -> bool | None:
        return _expect(self[index], bool, "boolean")
