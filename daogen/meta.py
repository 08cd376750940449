"""Metadata for one generated query struct, and checks of its custom methods."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from daogen.interface import InterfaceMethod
from daogen.model import GORM_KEYWORDS, Field, GenError, KeyWord, SourceCode
from daogen.naming import get_package_name, is_capitalize
from daogen.parser import InterfaceSet, Method, Param, default_method_table_name


@dataclass
class QueryStructMeta:
    """Everything the templates need to render one model and its query struct."""

    generated: bool = False
    file_name: str = ""
    s: str = ""
    query_struct_name: str = ""
    model_struct_name: str = ""
    table_name: str = ""
    table_comment: str = ""
    struct_info: Param = field(default_factory=Param)
    fields: list[Field] = field(default_factory=list)
    source: SourceCode = SourceCode.STRUCT
    import_pkg_paths: list[str] = field(default_factory=list)
    model_methods: list[Method] = field(default_factory=list)
    interface_mode: bool = False

    def revise_field_name(self) -> None:
        """Escape field names that clash with query method names."""
        self.revise_field_name_for(GORM_KEYWORDS)

    def revise_field_name_for(self, keywords: KeyWord) -> None:
        for f in self.fields:
            f.escape_keyword_for(keywords)

    def append_or_update_field(self, f: Field) -> None:
        """Append a field, or replace an existing field with the same name."""
        if f.is_relation():
            self.fields.append(f)
        if f.column_name == "":
            return
        for position, existing in enumerate(self.fields):
            if existing.name == f.name:
                self.fields[position] = f
                return
        self.fields.append(f)

    def has_field(self) -> bool:
        return bool(self.fields)

    def check(self) -> None:
        """Raise GenError if no query struct can be generated for this model."""
        if self.struct_info.in_main_pkg():
            raise GenError(
                "can't generated data object for struct in main package, "
                f"ignore:{self.model_struct_name}"
            )
        if not is_capitalize(self.model_struct_name):
            raise GenError(
                "can't generated data object for non-exportable struct, "
                f"ignore:{self.query_struct_name}"
            )

    def relations(self) -> list[Any]:
        return [f.relation for f in self.fields if f.is_relation()]

    def struct_comment(self) -> str:
        if self.table_comment:
            return self.table_comment
        if self.table_name:
            return f"mapped from table <{self.table_name}>"
        return "mapped from object"

    def query_struct_comment(self) -> str:
        if self.table_comment:
            return f"// {self.query_struct_name} {self.table_comment}"
        return ""

    def revise_diy_method(self) -> None:
        """Bind custom methods to the model and add a default TableName method.

        Duplicated method names are dropped; if any were found, GenError is
        raised after the remaining methods have been kept.
        """
        duplicates: list[str] = []
        table_name_method: Optional[Method] = None
        methods: list[Method] = []
        seen: set[str] = set()
        for method in self.model_methods:
            if method.method_name in seen:
                duplicates.append(method.method_name)
                continue
            if method.method_name == "TableName":
                table_name_method = method
            method.receiver.package = ""
            method.receiver.type = self.model_struct_name
            self._parse_table_name(method)
            methods.append(method)
            seen.add(method.method_name)
        if table_name_method is None:
            methods.append(default_method_table_name(self.model_struct_name))
        self.model_methods = methods

        if duplicates:
            raise GenError(
                "can't generate struct with duplicated method, please check method name: "
                + ",".join(duplicates)
            )

    def _parse_table_name(self, method: Optional[Method]) -> None:
        if method is None or not method.body or "@@table" not in method.body:
            return
        # return "@@table" => return TableNameUser
        method.body = method.body.replace('"@@table"', "TableName" + self.model_struct_name)
        # return "t_@@table" => return "t_user"
        method.body = method.body.replace("@@table", self.table_name)

    def iface_mode(self, on: bool) -> "QueryStructMeta":
        """A copy of this meta with interface mode switched on or off."""
        return dataclasses.replace(self, interface_mode=on)

    def return_object(self) -> str:
        if self.interface_mode:
            return f"I{self.model_struct_name}Do"
        return f"*{self.query_struct_name}Do"


def build_diy_method(
    interface_set: InterfaceSet,
    meta: QueryStructMeta,
    existing: Iterable[InterfaceMethod],
) -> list[InterfaceMethod]:
    """Check every interface method that applies to the model and split its SQL."""
    existing = list(existing)
    results: list[InterfaceMethod] = []
    for info in interface_set.interfaces:
        if not info.match_struct(meta.model_struct_name):
            continue
        for method in info.methods:
            t = InterfaceMethod(
                s=meta.s,
                target_struct=meta.query_struct_name,
                origin_struct=meta.struct_info,
                method_name=method.method_name,
                params=list(method.params),
                doc=method.doc,
                table=meta.table_name,
                interface_name=info.name,
                package=get_package_name(info.package),
            )
            t.check_method(existing, meta)
            t.check_params(method.params)
            t.check_result(method.result)
            t.check_sql()
            try:
                t.section.build_sql()
            except GenError as err:
                raise GenError(f"sql [{t.sql_string}] build err:{err}") from err
            results.append(t)
    return results


def get_struct_names(metas: Iterable[QueryStructMeta]) -> list[str]:
    return [m.model_struct_name for m in metas]