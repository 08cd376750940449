"""Core data model: SQL template statuses, keywords, fields, options and config."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

DEFAULT_MODEL_PKG = "model"


class GenError(Exception):
    """Raised when generation input is invalid."""


class Status(enum.IntEnum):
    """Kind of a parsed SQL template section."""

    UNKNOWN = 0
    SQL = 1
    DATA = 2
    VARIABLE = 3
    IF = 4
    ELSE = 5
    WHERE = 6
    SET = 7
    FOR = 8
    END = 9
    TRIM = 10


class SourceCode(enum.IntEnum):
    """Where a model's definition came from."""

    STRUCT = 0
    TABLE = 1
    OBJECT = 2


@dataclass(frozen=True)
class KeyWord:
    """A set of reserved words."""

    words: tuple[str, ...] = ()

    def full_match(self, word: str) -> bool:
        return word in self.words

    def contain(self, text: str) -> bool:
        return any(item in text for item in self.words)


GORM_KEYWORDS = KeyWord(
    (
        "UnderlyingDB", "UseDB", "UseModel", "UseTable", "Quote", "Debug", "TableName", "WithContext",
        "As", "Not", "Or", "Build", "Columns", "Hints",
        "Distinct", "Omit",
        "Select", "Where", "Order", "Group", "Having", "Limit", "Offset",
        "Join", "LeftJoin", "RightJoin",
        "Save", "Create", "CreateInBatches",
        "Update", "Updates", "UpdateColumn", "UpdateColumns",
        "Find", "FindInBatches", "First", "Take", "Last", "Pluck", "Count",
        "Scan", "ScanRows", "Row", "Rows",
        "Delete", "Unscoped",
        "Scopes",
    )
)

DO_KEYWORDS = KeyWord(("Alias", "TableName", "WithContext"))

GEN_KEYWORDS = KeyWord(("generateSQL", "whereClause", "setClause"))

DEFAULT_DATA_TYPE = "string"

_TYPE_GROUPS: dict[str, tuple[str, ...]] = {
    "int32": ("numeric", "integer", "int", "smallint", "mediumint", "year"),
    "int64": ("bigint",),
    "float32": ("float",),
    "float64": ("real", "double", "decimal"),
    "string": ("char", "varchar", "tinytext", "mediumtext", "longtext", "text", "json", "enum"),
    "[]byte": ("binary", "varbinary", "tinyblob", "blob", "mediumblob", "longblob"),
    "time.Time": ("time", "date", "datetime", "timestamp"),
    "[]uint8": ("bit",),
    "bool": ("boolean",),
}

_DATA_TYPES: dict[str, str] = {
    db_type: go_type for go_type, db_types in _TYPE_GROUPS.items() for db_type in db_types
}


def data_type_for(data_type: str, detail_type: str) -> str:
    """Map a database column type to a generated field type."""
    key = data_type.lower()
    if key == "tinyint":
        return "bool" if detail_type.strip().startswith("tinyint(1)") else "int32"
    return _DATA_TYPES.get(key, DEFAULT_DATA_TYPE)


_TITLED_TYPES = frozenset(
    {
        "string", "bytes",
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float64", "float32", "bool",
    }
)


@dataclass
class Field:
    """A field of a generated model."""

    name: str = ""
    type: str = ""
    column_name: str = ""
    column_comment: str = ""
    multiline_comment: bool = False
    tag: dict[str, str] = field(default_factory=dict)
    gorm_tag: dict[str, list[str]] = field(default_factory=dict)
    custom_gen_type: str = ""
    relation: Any = None

    def is_relation(self) -> bool:
        return self.relation is not None

    def gen_type(self) -> str:
        """Name of the query field kind used for this field."""
        if self.is_relation():
            return self.type
        if self.custom_gen_type:
            return self.custom_gen_type
        typ = self.type.lstrip("*")
        if typ in _TITLED_TYPES:
            return typ[:1].upper() + typ[1:]
        if typ == "time.Time":
            return "Time"
        if typ in ("json.RawMessage", "[]byte"):
            return "Bytes"
        if typ == "serializer":
            return "Serializer"
        return "Field"

    def escape_keyword(self) -> "Field":
        return self.escape_keyword_for(GORM_KEYWORDS)

    def escape_keyword_for(self, keywords: KeyWord) -> "Field":
        if keywords.full_match(self.name):
            self.name += "_"
        return self


class SQLBuffer:
    """Accumulates SQL text, collapsing runs of whitespace to one space."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def __len__(self) -> int:
        return sum(len(p) for p in self._parts)

    def __str__(self) -> str:
        return "".join(self._parts)

    def write(self, text: str) -> None:
        """Append text verbatim."""
        if text:
            self._parts.append(text)

    def write_sql(self, ch: str) -> None:
        """Append a character, turning whitespace into a single space."""
        if ch in ("\n", "\t", " "):
            if not self._parts or self._parts[-1][-1] != " ":
                self._parts.append(" ")
        else:
            self.write(ch)

    def dump(self) -> str:
        """Return the content and empty the buffer."""
        text = "".join(self._parts)
        self._parts.clear()
        return text


FIELD_OPTION_TYPE = "field"
METHOD_OPTION_TYPE = "method"


@dataclass(frozen=True)
class _FieldOption:
    func: Callable[[Optional[Field]], Optional[Field]]
    option_type = FIELD_OPTION_TYPE

    def __call__(self, f: Optional[Field]) -> Optional[Field]:
        return self.func(f)


class ModifyFieldOpt(_FieldOption):
    """Option that rewrites a field."""


class FilterFieldOpt(_FieldOption):
    """Option that drops a field by returning None."""


class CreateFieldOpt(_FieldOption):
    """Option that creates an extra field."""


@dataclass(frozen=True)
class AddMethodOpt:
    """Option that supplies custom methods for a model."""

    func: Callable[[], list[Any]]
    option_type = METHOD_OPTION_TYPE

    def methods(self) -> list[Any]:
        return list(self.func())


def sort_options(
    opts: Iterable[Any],
) -> tuple[list[ModifyFieldOpt], list[FilterFieldOpt], list[CreateFieldOpt], list[AddMethodOpt]]:
    """Split options into modify, filter, create and method options."""
    modify: list[ModifyFieldOpt] = []
    filters: list[FilterFieldOpt] = []
    create: list[CreateFieldOpt] = []
    methods: list[AddMethodOpt] = []
    for opt in opts:
        if isinstance(opt, ModifyFieldOpt):
            modify.append(opt)
        elif isinstance(opt, FilterFieldOpt):
            filters.append(opt)
        elif isinstance(opt, CreateFieldOpt):
            create.append(opt)
        elif isinstance(opt, AddMethodOpt):
            methods.append(opt)
    return modify, filters, create, methods


def _base(path: str) -> str:
    if path == "":
        return "."
    seps = "/" + os.sep
    stripped = path.rstrip(seps)
    if stripped == "":
        return os.sep
    for sep in set(seps):
        stripped = stripped.rsplit(sep, 1)[-1]
    return stripped


NameFunc = Callable[[str], str]


@dataclass
class Config:
    """Configuration for generating one model."""

    model_pkg: str = ""
    table_prefix: str = ""
    table_name: str = ""
    model_name: str = ""
    import_pkg_paths: list[str] = field(default_factory=list)
    model_opts: list[Any] = field(default_factory=list)

    schema_name_opts: list[Callable[[Any], str]] = field(default_factory=list)
    table_name_ns: Optional[NameFunc] = None
    model_name_ns: Optional[NameFunc] = None
    file_name_ns: Optional[NameFunc] = None

    data_type_map: dict[str, Callable[[Any], str]] = field(default_factory=dict)
    field_nullable: bool = False
    field_coverable: bool = False
    field_signable: bool = False
    field_with_index_tag: bool = False
    field_with_type_tag: bool = False
    field_json_tag_ns: Optional[NameFunc] = None

    modify_opts: list[ModifyFieldOpt] = field(default_factory=list)
    filter_opts: list[FilterFieldOpt] = field(default_factory=list)
    create_opts: list[CreateFieldOpt] = field(default_factory=list)
    method_opts: list[AddMethodOpt] = field(default_factory=list)

    def preprocess(self) -> "Config":
        """Fill defaults and sort options; returns self."""
        if not self.model_pkg:
            self.model_pkg = DEFAULT_MODEL_PKG
        self.model_pkg = _base(self.model_pkg)
        self.modify_opts, self.filter_opts, self.create_opts, self.method_opts = sort_options(
            self.model_opts
        )
        return self

    def get_names(self) -> tuple[str, str, str]:
        """Return (table name, struct name, file name)."""
        table_name, struct_name = self.table_name, self.model_name
        if self.model_name_ns is not None:
            struct_name = self.model_name_ns(table_name)
        if self.table_name_ns is not None:
            table_name = self.table_name_ns(table_name)
        if not table_name.startswith(self.table_prefix):
            table_name = self.table_prefix + table_name
        file_name = table_name.lower()
        if self.file_name_ns is not None:
            file_name = self.file_name_ns(self.table_name)
        return table_name, struct_name, file_name

    def get_model_methods(self) -> list[Any]:
        return [m for opt in self.method_opts for m in opt.methods()]

    def get_schema_name(self, db: Any) -> str:
        for opt in self.schema_name_opts:
            name = opt(db)
            if name:
                return name
        return ""


@dataclass
class Index:
    """A table index as seen by one of its columns."""

    source: Any
    priority: int

    @property
    def name(self) -> str:
        return getattr(self.source, "name", "")


def group_by_column(indexes: Iterable[Any]) -> dict[str, list[Index]]:
    """Group indexes by column name; priority is the column's 1-based position."""
    grouped: dict[str, list[Index]] = {}
    for idx in indexes or ():
        if idx is None:
            continue
        for position, column in enumerate(idx.columns, start=1):
            grouped.setdefault(column, []).append(Index(source=idx, priority=position))
    return grouped