"""
Flatten call arguments into placeholder fragments and scalar bind values.

One fragment is produced per argument:

- scalar          -> ``?``
- list            -> ``?, ?, ?``  (``(?, ?, ?)`` when nested inside another list)
- dict            -> ```a` = ?, `b` = ?``

``bind_values`` holds the scalars in the same left-to-right order as the
markers across all fragments.
"""

from typing import Any, NamedTuple

from sqlexpand.errors import MalformedArguments

from .values import ListValue, MapValue, Scalar, Value, is_index_contiguous, positional_items, to_value


class FlattenResult(NamedTuple):
    fragments: list[str]
    bind_values: list[Any]


def quote_identifier(name: str, quote: str = "`") -> str:
    """Quote a column name; the quote character inside the name is doubled."""
    return quote + name.replace(quote, quote * 2) + quote


def flatten(
    values: Any,
    braced: bool = False,
    *,
    marker: str = "?",
    quote: str = "`",
) -> FlattenResult:
    """
    Flatten an index-contiguous sequence of arguments.

    - braced: wrap list fragments in parentheses. The top-level call is unbraced;
      the elements of a list are flattened braced.
    - marker: bind marker of the target driver (``?`` or ``%s``).
    - quote: identifier quote used for dict keys.
    """
    if not is_index_contiguous(values):
        raise MalformedArguments("Params must be an indexed array (list or tuple)")

    fragments: list[str] = []
    bind_values: list[Any] = []

    for item in positional_items(values):
        value: Value = to_value(item)

        if isinstance(value, Scalar):
            fragments.append(marker)
            bind_values.append(value.value)
            continue

        if isinstance(value, ListValue):
            inner = flatten(value.items, True, marker=marker, quote=quote)
            joined = ", ".join(inner.fragments)
            fragments.append(f"({joined})" if braced else joined)
            bind_values.extend(inner.bind_values)
            continue

        if isinstance(value, MapValue):
            parts = []
            for key, scalar in value.items:
                ident = quote_identifier(key, quote)
                if marker == "%s":
                    # format-style drivers interpolate every "%" in the statement
                    ident = ident.replace("%", "%%")
                parts.append(f"{ident} = {marker}")
                bind_values.append(scalar.value)
            fragments.append(", ".join(parts))
            continue

    return FlattenResult(fragments, bind_values)
