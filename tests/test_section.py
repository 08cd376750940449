from dataclasses import dataclass

import pytest

from daogen.clause import ElseClause, IfClause, Part, SQLClause
from daogen.model import GenError, Status
from daogen.section import Section


@dataclass
class FakeMethod:
    table: str = "users"
    s: str = "u"
    has_for_params: bool = False


def build(items):
    """items: ('sql', quoted) | ('tmpl', text) | ('data', name) | ('var', name)"""
    section = Section()
    method = FakeMethod()
    for kind, text in items:
        if kind == "sql":
            section.members.append(Part(type=Status.SQL, value=text))
        elif kind == "tmpl":
            section.members.append(section.check_template(text))
        elif kind == "data":
            section.members.append(section.check_sql_var(text, Status.DATA, method))
        else:
            section.members.append(section.check_sql_var(text, Status.VARIABLE, method))
    return section, method


CASES = [
    (
        [("sql", '"select * from "'), ("var", "table")],
        ['"select * from "', '"users"'],
        ['generateSQL.WriteString("select * from users ")'],
    ),
    (
        [("sql", '"select * from "'), ("var", "table"), ("tmpl", "where"),
         ("sql", '" id>"'), ("data", "id"), ("tmpl", "end")],
        ['"select * from "', '"users"', "where", '" id>"', "id", "end"],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            "params = append(params,id)",
            'whereSQL0.WriteString("id>? ")',
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
    (
        [("sql", '"select * from "'), ("var", "table"), ("tmpl", "where"),
         ("tmpl", "if id > 0"), ("sql", '" id>"'), ("data", "id"),
         ("tmpl", "end"), ("tmpl", "end")],
        ['"select * from "', '"users"', "where", "if id > 0", '" id>"', "id", "end", "end"],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            "if id > 0 {",
            "params = append(params,id)",
            'whereSQL0.WriteString("id>? ")',
            "}",
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
    (
        [("sql", '"update "'), ("var", "table"), ("tmpl", "set"),
         ("tmpl", 'if name != ""'), ("sql", '"name="'), ("data", "name"), ("tmpl", "end"),
         ("sql", '","'),
         ("tmpl", "if id>0"), ("sql", '"id="'), ("data", "id"), ("tmpl", "end"),
         ("tmpl", "end"), ("sql", '" where id="'), ("data", "id")],
        ['"update "', '"users"', "set", 'if name != ""', '"name="', "name", "end",
         '","', "if id>0", '"id="', "id", "end", "end", '" where id="', "id"],
        [
            'generateSQL.WriteString("update users ")',
            "var setSQL0 strings.Builder",
            'if name != "" {',
            "params = append(params,name)",
            'setSQL0.WriteString("name=? ")',
            "}",
            'setSQL0.WriteString(", ")',
            "if id>0 {",
            "params = append(params,id)",
            'setSQL0.WriteString("id=? ")',
            "}",
            "helper.JoinSetBuilder(&generateSQL,setSQL0)",
            "params = append(params,id)",
            'generateSQL.WriteString("where id=? ")',
        ],
    ),
    (
        [("sql", '"select * from "'), ("var", "table"), ("tmpl", "where"),
         ("tmpl", "for _, name := range names"), ("sql", '"name="'), ("data", "name"),
         ("tmpl", "end"), ("tmpl", "end")],
        ['"select * from "', '"users"', "where", "for _, name := range names",
         '"name="', "name", "end", "end"],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            "for _, name := range names{",
            "params = append(params,name)",
            'whereSQL0.WriteString("name=? ")',
            "}",
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
]


@pytest.mark.parametrize("items,split,generated", CASES)
def test_build_sql_cases(items, split, generated):
    section, _ = build(items)
    assert [p.value for p in section.members] == split
    section.build_sql()
    assert section.tmpls == generated


def test_build_sql_empty_raises():
    with pytest.raises(GenError):
        Section().build_sql()


def test_check_sql_var_table():
    section = Section()
    part = section.check_sql_var("table", Status.VARIABLE, FakeMethod())
    assert part.type == Status.SQL
    assert part.value == '"users"'


def test_check_sql_var_data_sets_flag():
    method = FakeMethod()
    part = Section().check_sql_var("id", Status.DATA, method)
    assert method.has_for_params is True
    assert (part.type, part.value) == (Status.DATA, "id")


def test_check_sql_var_variable_is_quoted():
    method = FakeMethod(s="u")
    part = Section().check_sql_var("col", Status.VARIABLE, method)
    assert part.type == Status.VARIABLE
    assert part.value == "u.Quote(col)"
    assert method.has_for_params is False


def test_get_name_counters():
    section = Section()
    assert section.get_name(Status.WHERE) == "whereSQL0"
    assert section.get_name(Status.WHERE) == "whereSQL1"
    assert section.get_name(Status.SET) == "setSQL0"
    assert section.get_name(Status.TRIM) == "trimSQL0"
    assert section.get_name(Status.IF) == "generateSQL"


def test_check_template_for_range():
    part = Section().check_template("for _, name := range names")
    assert part.type == Status.FOR
    assert part.for_range.index == "_"
    assert part.for_range.value == "name"
    assert part.for_range.range_list == "names"


@pytest.mark.parametrize("tmpl", ["", "   ", "if generateSQL", "foo", "for a in b"])
def test_check_template_errors(tmpl):
    with pytest.raises(GenError):
        Section().check_template(tmpl)


def test_check_template_same_for_value_rejected():
    section = Section()
    section.members.append(section.check_template("for _, name := range names"))
    with pytest.raises(GenError):
        section.check_template("for i, name := range others")


def test_unclosed_where_raises():
    section, _ = build([("tmpl", "where"), ("sql", '"id=1"')])
    with pytest.raises(GenError):
        section.build_sql()


def test_trim_inside_trim_raises():
    section, _ = build([("tmpl", "trim"), ("tmpl", "trim"), ("tmpl", "end"), ("tmpl", "end")])
    with pytest.raises(GenError):
        section.build_sql()


def test_if_else_structure():
    section, _ = build([
        ("tmpl", "if id > 0"), ("sql", '"a"'), ("tmpl", "else"), ("sql", '"b"'), ("tmpl", "end"),
    ])
    result = section.build_sql()
    assert len(result) == 1
    assert isinstance(result[0], IfClause)
    kinds = [type(c) for c in result[0].value]
    assert kinds == [SQLClause, ElseClause]
    assert section.tmpls[0] == "if id > 0 {"
    assert section.tmpls[-1] == "}"
    assert "} else {" in section.tmpls


def test_has_more_and_sub_index():
    section, _ = build([("sql", '"a"'), ("sql", '"b"')])
    assert section.has_more()
    assert not section.is_null()
    section.current_index = 1
    assert not section.has_more()
    section.sub_index()
    assert section.current_index == 0