"""Runtime helpers for assembling dynamic SQL and checking model objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from daogen.model import GenError


@dataclass(frozen=True)
class Cond:
    """A piece of SQL used only when its condition holds."""

    cond: bool
    result: str


def if_clause(conds: Iterable[Cond]) -> str:
    """Join the results whose conditions hold, keeping a slot for the others."""
    return " " + " ".join((c.result if c.cond else "").strip(" ") for c in conds)


def where_clause(conds: Iterable[str]) -> str:
    return _join_clause(conds, "WHERE", _where_value, " ")


def set_clause(conds: Iterable[str]) -> str:
    return _join_clause(conds, "SET", _set_value, ",")


def _join_clause(conds: Iterable[str], keyword: str, deal: Callable[[str], str], sep: str) -> str:
    sql = trim_all(sep.join(deal(c) for c in conds))
    return f" {keyword} {sql}" if sql else sql


def trim_all(text: str) -> str:
    """Strip a leading and a trailing AND/OR/XOR connector or comma."""
    return _trim_right(_trim_left(text))


def _trim_left(text: str) -> str:
    text = text.strip()
    lower = text.lower()
    for prefix in ("and ", "or ", "xor ", ","):
        if lower.startswith(prefix):
            return text[len(prefix):]
    return text


def _trim_right(text: str) -> str:
    text = text.strip()
    lower = text.lower()
    # The leading space of the connector is kept; the next trim drops it.
    for suffix, cut in ((" and", 3), (" or", 2), (" xor", 3), (",", 1)):
        if lower.endswith(suffix):
            return text[: len(text) - cut]
    return text


def _where_value(value: str) -> str:
    value = value.strip(" ")
    lower = value.lower()
    if lower == "":
        return ""
    if lower.startswith(("and ", "or ", "xor ")):
        return value
    return "AND " + value


def _set_value(value: str) -> str:
    return value.strip(", ")


def join_where(value: str) -> str:
    """The WHERE part for a built condition, or an empty string."""
    value = trim_all(value)
    return f"WHERE {value} " if value else ""


def join_set(value: str) -> str:
    """The SET part for built assignments, or an empty string."""
    value = trim_all(value)
    return f"SET {value} " if value else ""


def join_trim_all(value: str) -> str:
    return trim_all(value) + " "


def check_object(obj: Any) -> None:
    """Raise GenError unless the object has a struct name and named, typed fields.

    The object provides ``struct_name`` and ``fields``; each field provides
    ``name`` and ``type``.
    """
    if obj.struct_name == "":
        raise GenError("Object's StructName() cannot be empty")
    for f in obj.fields:
        if f.name == "":
            raise GenError(f"Object {obj.struct_name}'s Field.Name() cannot be empty")
        if f.type == "":
            raise GenError(f"Object {obj.struct_name}'s Field.Type() cannot be empty")