"""Name helpers for generated structs and SQL variables."""

from __future__ import annotations

import re

from daogen.model import GenError

_MODEL_NAME = re.compile(r"\w+", re.ASCII)


def is_capitalize(s: str) -> bool:
    return bool(s) and "A" <= s[0] <= "Z"


def is_end(ch: str) -> bool:
    """Whether a character ends a SQL variable name."""
    if "a" <= ch <= "z" or "A" <= ch <= "Z" or "0" <= ch <= "9":
        return False
    return ch not in ("-", "_", ".")


def del_pointer_sym(name: str) -> str:
    return name.lstrip("*")


def get_package_name(full_name: str) -> str:
    return del_pointer_sym(full_name).split(".")[0]


def get_pure_name(s: str) -> str:
    """First letter, lower-cased, of a type name without pointer marks."""
    return del_pointer_sym(s).lower()[0]


def get_struct_name(t: str) -> str:
    return t.split(".")[-1]


def uncapitalize(s: str) -> str:
    return s[:1].lower() + s[1:]


def check_struct_name(name: str) -> None:
    """Raise GenError if a model name is not usable."""
    if name == "":
        return
    if not _MODEL_NAME.fullmatch(name):
        raise GenError("model name cannot contains invalid character")
    if not "A" <= name[0] <= "Z":
        raise GenError("model name must be initial capital")