"""
Property Values — Typed values for node and relationship property bags

Every value parsed out of a `{key: value}` map becomes one of these variants:

    StringValue   "Gradient Descent", 'v'
    NumberValue   2024, -1.5, 6.02e23   (raw lexeme kept for format checks)
    BooleanValue  true / false
    NullValue     null
    BareValue     unquoted words, $parameters, function calls like date("2020")
    ListValue     [1, "a", [2]]
    MapValue      {unit: "m/s"}

Format checks read `.text` instead of re-parsing quoted strings.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union


class PropertyValue:
    """Base class for all property value variants."""

    kind: str = "value"

    @property
    def text(self) -> str:
        """Plain string form used by pattern checks."""
        raise NotImplementedError

    def to_python(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class StringValue(PropertyValue):
    value: str
    kind = "string"

    @property
    def text(self) -> str:
        return self.value

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberValue(PropertyValue):
    value: Union[int, float]
    raw: str
    kind = "number"

    @classmethod
    def from_lexeme(cls, raw: str) -> "NumberValue":
        try:
            return cls(value=int(raw), raw=raw)
        except ValueError:
            return cls(value=float(raw), raw=raw)

    @property
    def text(self) -> str:
        return self.raw

    def to_python(self) -> Union[int, float]:
        return self.value


@dataclass(frozen=True)
class BooleanValue(PropertyValue):
    value: bool
    kind = "boolean"

    @property
    def text(self) -> str:
        return "true" if self.value else "false"

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class NullValue(PropertyValue):
    kind = "null"

    @property
    def text(self) -> str:
        return ""

    def to_python(self) -> None:
        return None


@dataclass(frozen=True)
class BareValue(PropertyValue):
    """Unquoted content kept verbatim (identifiers, parameters, calls)."""
    raw: str
    kind = "bare"

    @property
    def text(self) -> str:
        return self.raw

    def to_python(self) -> str:
        return self.raw


@dataclass(frozen=True)
class ListValue(PropertyValue):
    items: Tuple[PropertyValue, ...]
    kind = "list"

    @property
    def text(self) -> str:
        return "[" + ", ".join(item.text for item in self.items) + "]"

    def to_python(self) -> list:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class MapValue(PropertyValue):
    entries: Tuple[Tuple[str, PropertyValue], ...]
    kind = "map"

    @property
    def text(self) -> str:
        return "{" + ", ".join(f"{k}: {v.text}" for k, v in self.entries) + "}"

    def to_python(self) -> dict:
        return {k: v.to_python() for k, v in self.entries}


def text_of(value: PropertyValue) -> str:
    """Text of an optional value ('' when missing)."""
    if value is None:
        return ""
    return value.text


def to_python_dict(properties: Dict[str, PropertyValue]) -> Dict[str, Any]:
    """Convert a property bag to plain Python values (for JSON output)."""
    return {key: value.to_python() for key, value in properties.items()}
