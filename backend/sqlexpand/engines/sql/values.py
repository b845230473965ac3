"""
Call-site argument values as a closed set of variants: Scalar, ListValue, MapValue.

Python objects are converted once at the call boundary by ``to_value``; the
flattener then dispatches on the variant instead of inspecting raw objects.

Rules:
- None, bool, int, float, str, bytes, Decimal, date/time/datetime -> Scalar
  (bool becomes 0/1).
- list / tuple -> ListValue.
- Mapping keyed exactly 0..n-1 (in order) or empty -> ListValue;
  any other Mapping -> MapValue, whose values must all be scalars.
- Anything else is rejected; objects are not coerced to maps implicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Union

from sqlexpand.errors import MalformedArguments

_SCALAR_TYPES = (str, bytes, bytearray, int, float, Decimal, date, datetime, time)


@dataclass(frozen=True)
class Scalar:
    value: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", normalize_scalar(self.value))


@dataclass(frozen=True)
class ListValue:
    items: tuple["Value", ...]


@dataclass(frozen=True)
class MapValue:
    items: tuple[tuple[str, Scalar], ...]


Value = Union[Scalar, ListValue, MapValue]


def normalize_scalar(value: Any) -> Any:
    """Booleans are bound as 0/1; other scalars pass through."""
    if isinstance(value, bool):
        return int(value)
    return value


def is_scalar(obj: Any) -> bool:
    return obj is None or isinstance(obj, (bool, *_SCALAR_TYPES))


def is_index_contiguous(obj: Any) -> bool:
    """
    True if obj is positional: a list/tuple, or a Mapping whose keys are
    exactly 0..n-1 in insertion order. An empty Mapping counts as positional.
    """
    if isinstance(obj, (list, tuple)):
        return True
    if isinstance(obj, Mapping):
        return list(obj.keys()) == list(range(len(obj)))
    return False


def positional_items(obj: Any) -> list[Any]:
    """Elements of an index-contiguous collection, in index order."""
    if isinstance(obj, Mapping):
        return list(obj.values())
    return list(obj)


def to_value(obj: Any) -> Value:
    """Convert a Python call argument into a Value variant."""
    if isinstance(obj, (Scalar, ListValue, MapValue)):
        return obj
    if is_scalar(obj):
        return Scalar(obj)
    if is_index_contiguous(obj):
        return ListValue(tuple(to_value(item) for item in positional_items(obj)))
    if isinstance(obj, Mapping):
        pairs: list[tuple[str, Scalar]] = []
        for key, item in obj.items():
            if isinstance(item, Scalar):
                pairs.append((str(key), item))
                continue
            if not is_scalar(item):
                raise MalformedArguments(
                    "Recursive substitutions of non-scalars are not supported "
                    f"(key {key!r} holds {type(item).__name__})"
                )
            pairs.append((str(key), Scalar(item)))
        return MapValue(tuple(pairs))
    raise MalformedArguments(
        f"Unsupported argument type {type(obj).__name__}; "
        "pass a scalar, a list/tuple, or a dict"
    )
