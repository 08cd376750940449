"""Custom query methods declared on interfaces, and their SQL templates."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional

from daogen.model import GORM_KEYWORDS, GenError, SQLBuffer, Status
from daogen.naming import is_end
from daogen.parser import Param, param_to_string
from daogen.section import Part, Section, _quote


def _incomplete(sql: str) -> GenError:
    return GenError(f"incomplete SQL:{sql}")


@dataclass
class InterfaceMethod:
    """A method of a query interface, checked and split for code generation."""

    doc: str = ""
    s: str = ""
    origin_struct: Param = field(default_factory=Param)
    target_struct: str = ""
    method_name: str = ""
    params: list[Param] = field(default_factory=list)
    result: list[Param] = field(default_factory=list)
    result_data: Param = field(default_factory=Param)
    section: Optional[Section] = None
    sql_params: list[Param] = field(default_factory=list)
    sql_string: str = ""
    gorm_option: str = ""
    table: str = ""
    interface_name: str = ""
    package: str = ""
    has_for_params: bool = False

    def func_sign(self) -> str:
        return f"{self.method_name}({self.param_in_tmpl()}) ({self.result_param_in_tmpl()})"

    def has_sql_data(self) -> bool:
        """Whether the generated method needs a parameter list."""
        return bool(self.sql_params) or self.has_for_params

    def has_got_point(self) -> bool:
        return not self.has_need_new_result()

    def has_need_new_result(self) -> bool:
        data = self.result_data
        return not data.is_array and ((data.is_null() and data.is_time()) or data.is_map())

    def gorm_run_method_name(self) -> str:
        return "Find" if self.result_data.is_array else "Take"

    def return_sql_result(self) -> bool:
        return any(r.is_sql_result() for r in self.result)

    def return_sql_row(self) -> bool:
        return any(r.is_sql_row() for r in self.result)

    def return_sql_rows(self) -> bool:
        return any(r.is_sql_rows() for r in self.result)

    def return_nothing(self) -> bool:
        """True when neither an error nor rows affected is returned."""
        return not any(r.is_error() or r.name == "rowsAffected" for r in self.result)

    def return_rows_affected(self) -> bool:
        return any(r.name == "rowsAffected" for r in self.result)

    def return_error(self) -> bool:
        return any(r.is_error() for r in self.result)

    def is_repeat_from_different_interface(self, other: "InterfaceMethod") -> bool:
        return (
            self.method_name == other.method_name
            and self.interface_name != other.interface_name
            and self.target_struct == other.target_struct
        )

    def is_repeat_from_same_interface(self, other: "InterfaceMethod") -> bool:
        return (
            self.method_name == other.method_name
            and self.interface_name == other.interface_name
            and self.target_struct == other.target_struct
        )

    def param_in_tmpl(self) -> str:
        return param_to_string(self.params)

    def result_param_in_tmpl(self) -> str:
        return param_to_string(self.result)

    def sql_param_name(self, param: str) -> str:
        return param.replace(".", "")

    def doc_comment(self) -> str:
        """The doc text with a comment marker on every following line."""
        return self.doc.strip().replace("\n", "\n// ").replace("//  ", "// ")

    def check_method(self, methods: Iterable["InterfaceMethod"], meta: Any) -> None:
        """Reject keyword names and clashes with other methods or model fields.

        ``meta`` provides ``fields`` (each with ``name``) and ``model_struct_name``.
        """
        if GORM_KEYWORDS.full_match(self.method_name):
            raise GenError(f"can not use keyword as method name:{self.method_name}")
        for method in methods:
            if self.is_repeat_from_different_interface(method):
                raise GenError(
                    "can not generate method with the same name from different interface:"
                    f"[{self.interface_name}.{self.method_name}] and "
                    f"[{method.interface_name}.{method.method_name}]"
                )
        for f in meta.fields:
            if f.name == self.method_name:
                raise GenError(
                    "can not generate method same name with struct field:"
                    f"[{self.interface_name}.{self.method_name}] and "
                    f"[{meta.model_struct_name}.{f.name}]"
                )

    def check_params(self, params: Iterable[Param]) -> None:
        """Check input parameters and resolve placeholder types."""
        checked: list[Param] = []
        for original in params:
            param = replace(original)
            if param.package == "UNDEFINED":
                param.package = self.package
            elif param.is_error() or param.is_null():
                raise GenError(
                    f"type error on interface [{self.interface_name}] param: [{param.name}]"
                )
            elif param.is_gen_m():
                param.type = "map[string]interface{}"
                param.package = ""
            elif param.is_gen_t():
                param.type = self.origin_struct.type
                param.package = self.origin_struct.package
            checked.append(param)
        self.params = checked

    def _more_than_one_data(self) -> GenError:
        return GenError(
            "query method cannot return more than 1 data value in "
            f"[{self.interface_name}.{self.method_name}]"
        )

    def check_result(self, result: Iterable[Param]) -> None:
        """Check results, name them and pick the execution method."""
        checked: list[Param] = []
        has_error = False
        where = f"[{self.interface_name}.{self.method_name}]"
        for original in result:
            param = replace(original)
            if param.package == "UNDEFINED":
                param.package = self.package
            if param.is_gen_m():
                param.type = "map[string]interface{}"
                param.package = ""

            if param.in_main_pkg():
                raise GenError(f"query method cannot return struct of main package in {where}")
            if param.is_error():
                if has_error:
                    raise GenError(f"query method cannot return more than 1 error value in {where}")
                param.name = "err"
                has_error = True
            elif param.eq(self.origin_struct) or param.is_gen_t():
                if not self.result_data.is_null():
                    raise self._more_than_one_data()
                param.name = "result"
                param.type = self.origin_struct.type
                param.package = self.origin_struct.package
                self.result_data = param
            elif param.is_interface():
                raise GenError(f"query method can not return interface in {where}")
            elif param.is_gen_rows_affected():
                param.type = "int64"
                param.package = ""
                param.name = "rowsAffected"
                self.gorm_option = "Exec"
            elif param.is_sql_result():
                param.type = "Result"
                param.package = "sql"
                param.name = "result"
                self.gorm_option = "Statement.ConnPool.ExecContext"
            elif param.is_sql_row():
                param.type = "Row"
                param.package = "sql"
                param.name = "row"
                self.gorm_option = "Raw"
                param.is_pointer = True
            elif param.is_sql_rows():
                param.type = "Rows"
                param.package = "sql"
                param.name = "rows"
                self.gorm_option = "Raw"
                param.is_pointer = True
            else:
                if not self.result_data.is_null():
                    raise self._more_than_one_data()
                if param.package == "" and not (
                    param.is_base_type() or param.is_map() or param.is_time()
                ):
                    param.package = self.package
                param.name = "result"
                self.result_data = param
            checked.append(param)
        self.result = checked

    def check_sql(self) -> None:
        """Take the SQL from the doc comment and split it into parts."""
        self.sql_string = self._parse_doc_string()
        try:
            self.split_sql()
        except GenError as err:
            raise GenError(
                f"interface {self.interface_name} member method {self.method_name} "
                f"check sql err:{err}"
            ) from err

    def _default_option(self) -> str:
        return "Exec" if self.result_data.is_null() else "Raw"

    def _parse_doc_string(self) -> str:
        doc = self._sql_doc_string().strip()
        lower = doc.lower()
        if lower.startswith("sql("):
            doc = doc[4:-1]
            self.gorm_option = self._default_option()
        elif lower.startswith("where("):
            doc = doc[6:-1]
            self.gorm_option = "Where"
        else:
            self.gorm_option = self._default_option()
        if len(doc) >= 2 and doc.startswith('"') and doc.endswith('"'):
            doc = doc[1:-1]
        return doc

    def _sql_doc_string(self) -> str:
        doc = self.doc.strip()
        index = doc.find("\n\n")
        if index != -1:
            rest = doc[index + 2:]
            doc = doc[:index] if self.method_name in rest else rest
        if doc.startswith(self.method_name):
            doc = doc[len(self.method_name):]
        return doc

    def split_sql(self) -> None:
        """Split ``sql_string`` into the parts of a new section."""
        sql = self.sql_string
        n = len(sql)
        self.section = Section()
        buf = SQLBuffer()
        i = 0
        while i < n:
            ch = sql[i]
            if ch in ('"', "'"):
                i = self._copy_quoted(sql, i, buf)
            elif ch == "\\":
                if i + 1 < n and sql[i + 1] == "@":
                    i += 1
                    buf.write_sql(sql[i])
                else:
                    buf.write_sql(ch)
            elif ch in ("{", "@"):
                self._flush_sql(buf)
                if i + 1 >= n:
                    raise _incomplete(sql)
                if ch == "{" and sql[i + 1] == "{":
                    i = self._read_template(sql, i + 2, buf)
                elif ch == "@":
                    i = self._read_variable(sql, i + 1, buf)
            else:
                buf.write_sql(ch)
            i += 1
        self._flush_sql(buf)

    def _flush_sql(self, buf: SQLBuffer) -> None:
        clause = buf.dump()
        if clause.strip():
            self.section.members.append(Part(type=Status.SQL, value=_quote(clause)))

    @staticmethod
    def _copy_quoted(sql: str, i: int, buf: SQLBuffer) -> int:
        """Copy a quoted literal starting at ``i``; return the closing quote's index."""
        quote = sql[i]
        buf.write(quote)
        i += 1
        while True:
            if i >= len(sql):
                raise _incomplete(sql)
            buf.write(sql[i])
            if sql[i] == quote and sql[i - 1] != "\\":
                return i
            i += 1

    def _read_template(self, sql: str, i: int, buf: SQLBuffer) -> int:
        n = len(sql)
        while True:
            if i >= n:
                raise _incomplete(sql)
            if sql[i] == '"':
                i = self._copy_quoted(sql, i, buf) + 1
            if i + 1 >= n:
                raise _incomplete(sql)
            if sql[i] == "}" and sql[i + 1] == "}":
                i += 1
                clause = buf.dump()
                try:
                    part = self.section.check_template(clause)
                except GenError as err:
                    raise GenError(
                        f"sql [{sql}] dynamic template {clause} err:{err}"
                    ) from err
                self.section.members.append(part)
                return i
            buf.write_sql(sql[i])
            i += 1

    def _read_variable(self, sql: str, i: int, buf: SQLBuffer) -> int:
        n = len(sql)
        status = Status.DATA
        if sql[i] == "@":
            i += 1
            status = Status.VARIABLE
        while True:
            if i >= n or is_end(sql[i]):
                var = buf.dump()
                try:
                    part = self.section.check_sql_var(var, status, self)
                except GenError as err:
                    raise GenError(f"sql [{sql}] varable {var} err:{err}") from err
                self.section.members.append(part)
                return i - 1
            buf.write_sql(sql[i])
            i += 1

    def _check_sql_var_by_params(self, param: str, status: Status) -> Part:
        """Resolve a SQL variable against the method's parameters or the table name."""
        struct_name = param.split(".")[0]
        for p in self.params:
            if p.name != struct_name:
                continue
            if p.name != param:
                p = Param(name=param, type="string")
            if status == Status.DATA:
                if not self._is_param_exist(param):
                    self.sql_params.append(p)
            elif status == Status.VARIABLE:
                if p.type != "string" or p.is_array:
                    raise GenError(
                        f"variable name must be string :{param} type is {p.type_name()}"
                    )
                param = f"{self.s}.Quote({param})"
            return Part(type=status, value=param)
        if param == "table":
            return Part(type=Status.SQL, value=_quote(self.table))
        raise GenError(f"unknow variable param:{param}")

    def _is_param_exist(self, name: str) -> bool:
        return any(p.name == name for p in self.sql_params)

    def test_param_in_tmpl(self) -> str:
        """Arguments passed to the method in a generated unit test."""
        args = []
        for index, param in enumerate(self.params):
            typ = param.type
            if param.package:
                typ = f"{param.package}.{typ}"
            if param.is_array:
                typ = "[]" + typ
            if param.is_pointer:
                typ = "*" + typ
            args.append(f"tt.Input.Args[{index}].({typ})")
        return ",".join(args)

    def test_result_param_in_tmpl(self) -> str:
        return ",".join(f"res{i}" for i in range(1, len(self.result) + 1))

    def assert_in_tmpl(self) -> str:
        name = _quote(self.method_name)
        return "\n".join(
            f"assert(t, {name}, res{i + 1}, tt.Expectation.Ret[{i}])"
            for i in range(len(self.result))
        )