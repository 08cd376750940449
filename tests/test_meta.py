import pytest

from daogen.meta import QueryStructMeta, build_diy_method, get_struct_names
from daogen.model import Field, GenError, KeyWord
from daogen.parser import InterfaceInfo, InterfaceSet, Method, Param


def make_meta(**kwargs):
    defaults = dict(
        s="u",
        query_struct_name="user",
        model_struct_name="User",
        table_name="users",
        struct_info=Param(package="model", type="User"),
    )
    defaults.update(kwargs)
    return QueryStructMeta(**defaults)


def make_set(*methods, name="Querier", package="query.Querier", apply=("User",)):
    info = InterfaceInfo(name=name, methods=list(methods), package=package, apply_struct=list(apply))
    return InterfaceSet(interfaces=[info])


def test_struct_comment_variants():
    assert make_meta(table_comment="people").struct_comment() == "people"
    assert make_meta().struct_comment() == "mapped from table <users>"
    assert make_meta(table_name="").struct_comment() == "mapped from object"


def test_query_struct_comment():
    assert make_meta(table_comment="people").query_struct_comment() == "// user people"
    assert make_meta().query_struct_comment() == ""


def test_return_object_and_iface_mode_copy():
    meta = make_meta()
    assert meta.return_object() == "*userDo"
    iface = meta.iface_mode(True)
    assert iface.return_object() == "IUserDo"
    assert meta.interface_mode is False


def test_check_rejects_main_package():
    with pytest.raises(GenError, match="main package"):
        make_meta(struct_info=Param(package="main", type="User")).check()


def test_check_rejects_unexported():
    with pytest.raises(GenError, match="non-exportable"):
        make_meta(model_struct_name="user").check()


def test_append_or_update_field_replaces_by_name():
    meta = make_meta()
    meta.append_or_update_field(Field(name="ID", column_name="id", type="int"))
    meta.append_or_update_field(Field(name="ID", column_name="id", type="int64"))
    assert [f.type for f in meta.fields] == ["int64"]
    assert meta.has_field()


def test_append_or_update_field_skips_fields_without_column():
    meta = make_meta()
    meta.append_or_update_field(Field(name="Extra"))
    assert meta.fields == []
    assert not meta.has_field()


def test_relations_are_appended_and_listed():
    meta = make_meta()
    meta.append_or_update_field(Field(name="ID", column_name="id"))
    meta.append_or_update_field(Field(relation="rel"))
    assert meta.relations() == ["rel"]
    assert len(meta.fields) == 2


def test_revise_field_name_escapes_keywords():
    meta = make_meta(fields=[Field(name="Where"), Field(name="Age")])
    meta.revise_field_name()
    assert [f.name for f in meta.fields] == ["Where_", "Age"]
    meta.revise_field_name_for(KeyWord(("Age",)))
    assert meta.fields[1].name == "Age_"


def test_revise_diy_method_adds_default_table_name():
    meta = make_meta(model_methods=[Method(method_name="IsEmpty", receiver=Param(package="x", type="Y"))])
    meta.revise_diy_method()
    names = [m.method_name for m in meta.model_methods]
    assert names == ["IsEmpty", "TableName"]
    assert meta.model_methods[0].receiver.type == "User"
    assert meta.model_methods[0].receiver.package == ""


def test_revise_diy_method_replaces_table_placeholder():
    custom = Method(method_name="TableName", body='{ return "@@table" }')
    other = Method(method_name="Prefixed", body='{ return "t_@@table" }')
    meta = make_meta(model_methods=[custom, other])
    meta.revise_diy_method()
    assert [m.method_name for m in meta.model_methods] == ["TableName", "Prefixed"]
    assert meta.model_methods[0].body == "{ return TableNameUser }"
    assert meta.model_methods[1].body == '{ return "t_users" }'


def test_revise_diy_method_reports_duplicates_but_keeps_first():
    meta = make_meta(model_methods=[Method(method_name="A"), Method(method_name="A")])
    with pytest.raises(GenError, match="duplicated method, please check method name: A"):
        meta.revise_diy_method()
    assert [m.method_name for m in meta.model_methods] == ["A", "TableName"]


def test_get_struct_names():
    metas = [make_meta(), make_meta(model_struct_name="Order")]
    assert get_struct_names(metas) == ["User", "Order"]


def test_build_diy_method_splits_sql():
    method = Method(
        method_name="FindByID",
        doc="select * from @@table where id=@id",
        params=[Param(name="id", type="int")],
        result=[Param(type="error")],
    )
    built = build_diy_method(make_set(method), make_meta(), [])
    assert len(built) == 1
    t = built[0]
    assert t.interface_name == "Querier"
    assert t.package == "query"
    assert t.target_struct == "user"
    assert t.gorm_option == "Exec"
    assert t.result[0].name == "err"
    assert t.section.tmpls == [
        "params = append(params,id)",
        'generateSQL.WriteString("select * from users where id=? ")',
    ]


def test_build_diy_method_ignores_unmatched_interfaces():
    method = Method(method_name="FindByID", doc="select 1")
    assert build_diy_method(make_set(method, apply=("Order",)), make_meta(), []) == []


def test_build_diy_method_rejects_keyword_name():
    method = Method(method_name="Where", doc="select 1")
    with pytest.raises(GenError, match="keyword"):
        build_diy_method(make_set(method), make_meta(), [])


def test_build_diy_method_rejects_field_name_clash():
    method = Method(method_name="Age", doc="select 1")
    meta = make_meta(fields=[Field(name="Age", column_name="age")])
    with pytest.raises(GenError, match="same name with struct field"):
        build_diy_method(make_set(method), meta, [])


def test_build_diy_method_rejects_empty_sql():
    method = Method(method_name="Nothing", doc="")
    with pytest.raises(GenError, match="build err:sql is null"):
        build_diy_method(make_set(method), make_meta(), [])


def test_build_diy_method_rejects_same_name_from_other_interface():
    method = Method(method_name="FindByID", doc="select 1")
    first = build_diy_method(make_set(method, name="A"), make_meta(), [])
    with pytest.raises(GenError, match="different interface"):
        build_diy_method(make_set(method, name="B"), make_meta(), first)