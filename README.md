# daogen

`daogen` holds the core of a data-access code generator. It takes query
templates written in method doc comments, checks them, splits them into
parts and builds the lines of code that assemble the final SQL at run time.
Around that core it keeps the metadata that generated model and query code
is built from: fields, indexes, parameters, interfaces and naming rules.

It has no dependencies outside the standard library and needs Python 3.10
or later.

## Installing

```
pip install daogen
```

To run the tests, install the `test` extra and run pytest from the project
directory:

```
pip install "daogen[test]"
pytest
```

## What is inside

- `daogen.model`: template part kinds (`Status`), sources of a model
  (`SourceCode`), reserved words (`KeyWord`, with `GORM_KEYWORDS`,
  `DO_KEYWORDS` and `GEN_KEYWORDS`), model fields (`Field`, with
  `gen_type()` and keyword escaping), the whitespace-collapsing
  `SQLBuffer`, field and method options (`ModifyFieldOpt`,
  `FilterFieldOpt`, `CreateFieldOpt`, `AddMethodOpt`, `sort_options`),
  generator settings (`Config`, with `preprocess()`, `get_names()`,
  `get_model_methods()` and `get_schema_name()`) and index grouping
  (`Index`, `group_by_column`). `data_type_for` maps a database column
  type name to a field type. Invalid input raises `GenError`.
- `daogen.naming`: helpers for struct, package and receiver names
  (`uncapitalize`, `get_struct_name`, `get_package_name`, `get_pure_name`,
  ...) and `check_struct_name`, which raises `GenError` for names that are
  not word characters only or do not start with a capital letter.
- `daogen.imports`: `ImportPaths`, an immutable, ordered list of quoted
  import paths with blank entries between groups; `add()` returns a new
  list and skips paths already present.
- `daogen.parser`: `Param`, `Method`, `InterfaceInfo` and `InterfaceSet`,
  plain descriptions of interface methods and their parameters, plus
  `param_to_string` and `default_method_table_name`.
- `daogen.helper`: run-time SQL helpers: `if_clause`, `where_clause`,
  `set_clause`, `trim_all`, `join_where`, `join_set`, `join_trim_all`, and
  `check_object`, which validates an object with `struct_name` and
  `fields`.
- `daogen.clause`: the template parts (`Part`, `ForRange`) and the clauses
  built from them (`SQLClause`, `IfClause`, `ElseClause`, `WhereClause`,
  `SetClause`, `TrimClause`, `ForClause`).
- `daogen.section`: `Section`, which holds the parts of one template and
  whose `build_sql()` fills `tmpls` with code lines and returns the
  top-level clauses.
- `daogen.interface`: `InterfaceMethod`, which checks a method's name
  (`check_method`), parameters (`check_params`), results (`check_result`)
  and doc-comment SQL (`check_sql`, `split_sql`), and renders signatures
  and unit-test snippets.
- `daogen.meta`: `QueryStructMeta`, the description of one generated query
  struct, with `build_diy_method` (checks and splits every interface method
  that applies to a model) and `get_struct_names`.
- `daogen.pool`: `Pool`, a bounded token pool for limiting concurrent
  work; it can be used as a context manager, and `async_wait_all()`
  returns a `threading.Event` set once all tokens are back.

## Example

```python
from daogen.interface import InterfaceMethod
from daogen.parser import Param

method = InterfaceMethod(
    table="users",
    params=[Param(name="id", type="int")],
)
method.sql_string = "select * from @@table {{where}} id>@id{{end}}"
method.split_sql()
method.section.build_sql()

for line in method.section.tmpls:
    print(line)
```

prints

```
generateSQL.WriteString("select * from users ")
var whereSQL0 strings.Builder
params = append(params,id)
whereSQL0.WriteString("id>? ")
helper.JoinWhereBuilder(&generateSQL,whereSQL0)
```

Templates support `@name` for bound values, `@@name` for quoted
identifiers (`@@table` is replaced by the method's table name), and the
blocks `{{if ...}}`, `{{else}}`, `{{where}}`, `{{set}}`, `{{trim}}` and
`{{for i, v := range list}}`, each closed with `{{end}}`. A malformed
template raises `daogen.model.GenError`.

## What it does not do

`daogen` is a library of building blocks, not a complete generator. It
does not connect to a database or read table columns, it does not read
source files to find interfaces or custom methods (you fill
`InterfaceSet` and `Method` yourself), it does not render or write the
generated files, and it has no command-line tool.