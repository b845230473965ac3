"""
Positional placeholder substitution for SQL templates.

Every ``?`` outside string literals, quoted identifiers and comments is one
argument slot. ``substitute`` replaces the Nth slot with the Nth fragment;
inserted fragments are not scanned again.
"""

from collections.abc import Sequence

from sqlexpand.errors import MalformedArguments

PLACEHOLDER = "?"


def find_placeholders(sql: str, placeholder: str = PLACEHOLDER) -> list[int]:
    """Offsets of placeholders in sql, skipping quoted text and comments.

    Handles single-quoted (``'...'``, doubled quote or backslash escapes),
    double-quoted and backtick-quoted identifiers (doubled quote only),
    dollar-quoted (``$$...$$``) bodies, ``--`` line comments and
    ``/* ... */`` block comments.
    """
    positions: list[int] = []
    i = 0
    length = len(sql)

    while i < length:
        ch = sql[i]

        if ch in ("'", '"', "`"):
            quote = ch
            i += 1
            while i < length:
                c = sql[i]
                if c == quote:
                    if i + 1 < length and sql[i + 1] == quote:
                        i += 2
                        continue
                    i += 1
                    break
                if c == "\\" and quote == "'" and i + 1 < length:
                    i += 2
                    continue
                i += 1
            continue

        if ch == "$" and i + 1 < length and sql[i + 1] == "$":
            end = sql.find("$$", i + 2)
            i = length if end == -1 else end + 2
            continue

        if ch == "-" and i + 1 < length and sql[i + 1] == "-":
            end = sql.find("\n", i)
            i = length if end == -1 else end + 1
            continue

        if ch == "/" and i + 1 < length and sql[i + 1] == "*":
            end = sql.find("*/", i + 2)
            i = length if end == -1 else end + 2
            continue

        if ch == placeholder:
            positions.append(i)

        i += 1

    return positions


def substitute(
    sql: str,
    fragments: Sequence[str],
    *,
    escape_percent: bool = False,
    placeholder: str = PLACEHOLDER,
) -> str:
    """
    Replace placeholders in sql with fragments, one-for-one and in order.

    escape_percent: double every literal ``%`` of the template, for drivers
    that interpolate ``%s`` markers (pymysql, psycopg).
    """
    positions = find_placeholders(sql, placeholder)
    if len(positions) != len(fragments):
        raise MalformedArguments(
            f"SQL has {len(positions)} placeholder(s) but {len(fragments)} argument(s) were given"
        )

    def _text(chunk: str) -> str:
        return chunk.replace("%", "%%") if escape_percent else chunk

    out: list[str] = []
    prev = 0
    for pos, fragment in zip(positions, fragments):
        out.append(_text(sql[prev:pos]))
        out.append(fragment)
        prev = pos + len(placeholder)
    out.append(_text(sql[prev:]))
    return "".join(out)
