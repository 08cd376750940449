"""Parameters, methods and interfaces read from user-declared query interfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

_BASE_TYPES = frozenset(
    {
        "string", "byte",
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float64", "float32",
        "bool",
        "time.Time",
    }
)


@dataclass
class Param:
    """A parameter or result of a method, e.g. ``user model.User``."""

    pkg_path: str = ""
    package: str = ""
    name: str = ""
    type: str = ""
    is_array: bool = False
    is_pointer: bool = False

    def eq(self, other: "Param") -> bool:
        """Whether both refer to the same package and type."""
        return self.package == other.package and self.type == other.type

    def is_error(self) -> bool:
        return self.type == "error"

    def is_gen_m(self) -> bool:
        return self.package == "gen" and self.type == "M"

    def is_gen_rows_affected(self) -> bool:
        return self.package == "gen" and self.type == "RowsAffected"

    def is_map(self) -> bool:
        return self.type.startswith("map[")

    def is_gen_t(self) -> bool:
        return self.package == "gen" and self.type == "T"

    def is_interface(self) -> bool:
        return self.type == "interface{}"

    def is_null(self) -> bool:
        return self.package == "" and self.type == "" and self.name == ""

    def in_main_pkg(self) -> bool:
        return self.package == "main"

    def is_time(self) -> bool:
        return self.package == "time" and self.type == "Time"

    def is_sql_result(self) -> bool:
        return (self.package, self.type) in (("sql", "Result"), ("gen", "SQLResult"))

    def is_sql_row(self) -> bool:
        return (self.package, self.type) in (("sql", "Row"), ("gen", "SQLRow"))

    def is_sql_rows(self) -> bool:
        return (self.package, self.type) in (("sql", "Rows"), ("gen", "SQLRows"))

    def type_name(self) -> str:
        return "[]" + self.type if self.is_array else self.type

    def tmpl_string(self) -> str:
        """Render the parameter as it appears in a generated signature."""
        parts = []
        if self.name:
            parts.append(self.name + " ")
        if self.is_array:
            parts.append("[]")
        if self.is_pointer:
            parts.append("*")
        if self.package:
            parts.append(self.package + ".")
        parts.append(self.type)
        return "".join(parts)

    def is_base_type(self) -> bool:
        return self.type in _BASE_TYPES


def param_to_string(params: Iterable[Param]) -> str:
    """Join parameters into a comma separated signature list."""
    return ",".join(p.tmpl_string() for p in params)


@dataclass
class Method:
    """A custom method bound to a model or query struct."""

    receiver: Param = field(default_factory=Param)
    method_name: str = ""
    doc: str = ""
    params: list[Param] = field(default_factory=list)
    result: list[Param] = field(default_factory=list)
    body: str = ""

    def func_sign(self) -> str:
        return f"{self.method_name}({self.param_in_tmpl()}) ({self.result_param_in_tmpl()})"

    def base_struct_tmpl(self) -> str:
        return self.receiver.tmpl_string()

    def param_in_tmpl(self) -> str:
        return param_to_string(self.params)

    def result_param_in_tmpl(self) -> str:
        return param_to_string(self.result)

    def doc_comment(self) -> str:
        """The doc text with a comment marker after every line break."""
        return self.doc.strip().replace("\n", "\n//")


def default_method_table_name(struct_name: str) -> Method:
    """The TableName method generated when a model defines none."""
    return Method(
        receiver=Param(is_pointer=True, type=struct_name),
        method_name="TableName",
        doc=f"TableName {struct_name}'s table name ",
        result=[Param(type="string")],
        body=f"{{\n\treturn TableName{struct_name}\n}} ",
    )


@dataclass
class InterfaceInfo:
    """A query interface and the structs it applies to."""

    name: str = ""
    doc: str = ""
    methods: list[Method] = field(default_factory=list)
    package: str = ""
    apply_struct: list[str] = field(default_factory=list)

    def match_struct(self, name: str) -> bool:
        return name in self.apply_struct


@dataclass
class InterfaceSet:
    """Interfaces collected for generation, with the imports seen beside them."""

    interfaces: list[InterfaceInfo] = field(default_factory=list)
    imports: dict[str, str] = field(default_factory=dict)