"""Clauses produced from a split SQL template, and the parts they are built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from daogen.model import Status


@dataclass
class ForRange:
    """The header of a ``for`` loop in a SQL template."""

    index: str = ""
    value: str = ""
    suffix: str = ""
    range_list: str = ""

    def __str__(self) -> str:
        return f"for {self.index}, {self.value} := range {self.range_list}"


@dataclass
class Part:
    """One piece of a split SQL template: literal SQL, a variable or a template tag."""

    type: Status = Status.UNKNOWN
    value: str = ""
    for_range: ForRange = field(default_factory=ForRange)
    sql_slice: Any = field(default=None, repr=False, compare=False)

    def is_end(self) -> bool:
        return self.type == Status.END

    def sql_param_name(self) -> str:
        return self.value.replace(".", "")

    def __str__(self) -> str:
        if self.type == Status.FOR:
            return str(self.for_range)
        return self.value


@dataclass
class _Clause:
    var_name: str = ""
    type: Status = Status.UNKNOWN


@dataclass
class SQLClause(_Clause):
    """Literal SQL and variables written into a builder."""

    value: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        sql = "+".join(self.value)
        if sql.startswith('"'):
            sql = '"' + sql.lstrip('" ')
        if not sql.endswith(' "'):
            sql += '+" "'
        return sql.replace('"+"', "")

    def create(self) -> str:
        return f"{self.var_name}.WriteString({self})"

    def finish(self) -> str:
        return f"{self.var_name}.WriteString({self})"


@dataclass
class IfClause(_Clause):
    """An ``if`` block."""

    value: list[Any] = field(default_factory=list)
    slice: Part = field(default_factory=Part)

    def __str__(self) -> str:
        return self.slice.value

    def create(self) -> str:
        return f"{self} {{"

    def finish(self) -> str:
        return "}"


@dataclass
class ElseClause(IfClause):
    """An ``else`` branch of an ``if`` block."""

    def create(self) -> str:
        return f"}} {self} {{"

    def finish(self) -> str:
        return ""


@dataclass
class WhereClause(_Clause):
    """A ``where`` block collected into its own builder."""

    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.WhereTrim({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinWhereBuilder(&{name},{self.var_name})"


@dataclass
class SetClause(_Clause):
    """A ``set`` block collected into its own builder."""

    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.SetTrim({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinSetBuilder(&{name},{self.var_name})"


@dataclass
class TrimClause(_Clause):
    """A ``trim`` block collected into its own builder."""

    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.TrimALL({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinTrimAllBuilder(&{name},{self.var_name})"


@dataclass
class ForClause(_Clause):
    """A ``for`` loop block."""

    value: list[Any] = field(default_factory=list)
    for_range: ForRange = field(default_factory=ForRange)
    for_slice: Part = field(default_factory=Part)

    def __str__(self) -> str:
        return self.for_slice.value + "{"

    def create(self) -> str:
        return str(self)

    def finish(self) -> str:
        return "}"