"""A SQL template split into parts, and the code lines built from it."""

from __future__ import annotations

import re
from typing import Any, Union

from daogen.clause import (
    ElseClause,
    ForClause,
    ForRange,
    IfClause,
    Part,
    SetClause,
    SQLClause,
    TrimClause,
    WhereClause,
)
from daogen.model import GEN_KEYWORDS, GenError, Status

Clause = Union[SQLClause, IfClause, ElseClause, WhereClause, SetClause, TrimClause, ForClause]

_SQL_TYPES = (Status.SQL, Status.DATA, Status.VARIABLE)

_SECTION_TYPES = {
    "if": Status.IF,
    "else": Status.ELSE,
    "for": Status.FOR,
    "where": Status.WHERE,
    "set": Status.SET,
    "end": Status.END,
    "trim": Status.TRIM,
}

_TEMPLATE_SEPARATORS = re.compile(r"[: =,]")

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _quote(text: str) -> str:
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    return '"' + "".join(out) + '"'


class Section:
    """The parts of a SQL template and the code lines generated from them."""

    def __init__(self) -> None:
        self.members: list[Part] = []
        self.tmpls: list[str] = []
        self.current_index = 0
        self.clause_total: dict[Status, int] = {Status.WHERE: 0, Status.SET: 0}
        self.for_value: list[ForRange] = []

    def _next(self) -> Part:
        if self.current_index < len(self.members) - 1:
            self.current_index += 1
            return self.members[self.current_index]
        return Part(type=Status.END)

    def sub_index(self) -> None:
        """Step back one part."""
        self.current_index -= 1

    def has_more(self) -> bool:
        return self.current_index < len(self.members) - 1

    def is_null(self) -> bool:
        return not self.members

    def _current(self) -> Part:
        return self.members[self.current_index]

    def _append_tmpl(self, value: str) -> None:
        self.tmpls.append(value)

    def _has_same_name(self, value: str) -> bool:
        return any(p.type == Status.FOR and p.for_range.value == value for p in self.members)

    def build_sql(self) -> list[Clause]:
        """Build code lines into ``tmpls`` and return the top-level clauses."""
        if self.is_null():
            raise GenError("sql is null")
        name = "generateSQL"
        res: list[Clause] = []
        while True:
            c = self._current()
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(name)
                res.append(sql_clause)
                self._append_tmpl(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.append(where_clause)
                self._append_tmpl(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.append(set_clause)
                self._append_tmpl(set_clause.finish(name))
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.append(trim_clause)
                self._append_tmpl(trim_clause.finish(name))
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type != Status.END:
                raise GenError(f"unknow clause:{c.value}")
            if not self.has_more():
                break
            self._next()
        return res

    def _parse_if(self, name: str) -> IfClause:
        res = IfClause(slice=self._current())
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(name)
                res.value.append(sql_clause)
                self._append_tmpl(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self._append_tmpl(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.value.append(set_clause)
                self._append_tmpl(set_clause.finish(name))
            elif c.type == Status.ELSE:
                res.value.append(self._parse_else(name))
            elif c.type == Status.FOR:
                res.value.append(self._parse_for(name))
                self._append_tmpl(res.finish())
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(name))
            elif c.type == Status.END:
                return res
            else:
                raise GenError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise GenError("incomplete SQL,if not end")
        return res

    def _parse_else(self, name: str) -> ElseClause:
        res = ElseClause(slice=self._current())
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(name)
                res.value.append(sql_clause)
                self._append_tmpl(sql_clause.create())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self._append_tmpl(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.value.append(set_clause)
                self._append_tmpl(set_clause.finish(name))
            elif c.type == Status.ELSE:
                res.value.append(self._parse_else(name))
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.value.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(name))
            else:
                self.sub_index()
                return res
            if not self.has_more():
                break
            c = self._next()
        return res

    def _parse_block_body(self, res: Any, allow_trim: bool) -> Part:
        """Parse the inside of a where/set/trim block; return the last part seen."""
        c = self._current()
        while True:
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(res.var_name)
                res.value.append(sql_clause)
                self._append_tmpl(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(res.var_name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(res.var_name)
                res.value.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self._append_tmpl(where_clause.finish(res.var_name))
            elif c.type == Status.TRIM and allow_trim:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(res.var_name))
            elif c.type == Status.END:
                return c
            else:
                raise GenError(f"unknow clause : {c.value}")
            if not self.has_more():
                return c
            c = self._next()

    def _parse_where(self) -> WhereClause:
        c = self._current()
        res = WhereClause(var_name=self.get_name(c.type))
        self._append_tmpl(res.create())
        res.type = c.type
        if not self.has_more():
            return res
        self._next()
        if self._parse_block_body(res, allow_trim=True).is_end():
            return res
        raise GenError("incomplete SQL,where not end")

    def _parse_set(self) -> SetClause:
        c = self._current()
        res = SetClause(var_name=self.get_name(c.type))
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        res.type = self._next().type
        last = self._parse_block_body(res, allow_trim=True)
        if last.is_end() and last is not self._current():
            raise GenError("incomplete SQL,set not end")
        return res

    def _parse_trim(self) -> TrimClause:
        c = self._current()
        res = TrimClause(var_name=self.get_name(c.type))
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        res.type = self._next().type
        last = self._parse_block_body(res, allow_trim=False)
        if last.is_end() and last is not self._current():
            raise GenError("incomplete SQL,set not end")
        return res

    def _parse_for(self, name: str) -> ForClause:
        c = self._current()
        res = ForClause(for_slice=c, for_range=c.for_range)
        self._append_tmpl(res.create())
        self.for_value.append(res.for_slice.for_range)
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _SQL_TYPES:
                str_clause = self._parse_sql(name)
                res.value.append(str_clause)
                self._append_tmpl(f"{name}.WriteString({str_clause})")
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.value.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(name))
            elif c.type == Status.END:
                self.for_value.pop()
                return res
            else:
                raise GenError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise GenError("incomplete SQL,set not end")
        return res

    def _parse_sql(self, name: str) -> SQLClause:
        res = SQLClause(var_name=name, type=Status.SQL)
        while True:
            c = self._current()
            if c.type in (Status.SQL, Status.VARIABLE):
                res.value.append(c.value)
            elif c.type == Status.DATA:
                self._append_tmpl(f"params = append(params,{c.value})")
                res.value.append('"?"')
            else:
                self.sub_index()
                return res
            if not self.has_more():
                return res
            self._next()

    def check_sql_var(self, param: str, status: Status, method: Any) -> Part:
        """Turn a ``@name`` or ``@@name`` reference into a part.

        ``method`` provides ``table``, ``s`` and a writable ``has_for_params``.
        """
        if status == Status.VARIABLE and param == "table":
            return Part(type=Status.SQL, value=_quote(method.table))
        if status == Status.DATA:
            method.has_for_params = True
        if status == Status.VARIABLE:
            param = f"{method.s}.Quote({param})"
        return Part(type=status, value=param)

    def get_name(self, status: Status) -> str:
        """Builder variable name for a block; counters advance on each call."""
        prefixes = {Status.WHERE: "whereSQL", Status.SET: "setSQL", Status.TRIM: "trimSQL"}
        prefix = prefixes.get(status)
        if prefix is None:
            return "generateSQL"
        count = self.clause_total.get(status, 0)
        self.clause_total[status] = count + 1
        return f"{prefix}{count}"

    def check_template(self, tmpl: str) -> Part:
        """Check a ``{{...}}`` tag's syntax and return it as a part."""
        part = Part(value=tmpl, sql_slice=self)
        split_list = [t for t in _TEMPLATE_SEPARATORS.split(tmpl.strip()) if t]
        if not split_list:
            raise GenError("template is null")
        if GEN_KEYWORDS.contain(tmpl):
            raise GenError("template can not use gen keywords")
        status = _SECTION_TYPES.get(split_list[0])
        if status is None:
            raise GenError(f"unknown syntax: {split_list[0]}")
        part.type = status
        if status == Status.FOR:
            if len(split_list) != 5:
                raise GenError(f"for range syntax error: {tmpl}")
            if self._has_same_name(split_list[2]):
                raise GenError("cannot use the same value name in different for loops")
            part.for_range = ForRange(
                index=split_list[1], value=split_list[2], range_list=split_list[4]
            )
        return part