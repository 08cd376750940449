from daogen.imports import IMPORT_LIST, UNIT_TEST_IMPORT_LIST, ImportPaths


def test_add_quotes_and_terminates_group():
    result = ImportPaths().add(" fmt ")
    assert result.paths == ('"fmt"', "")


def test_add_keeps_already_quoted():
    result = ImportPaths().add('"os"')
    assert result.paths[0] == '"os"'


def test_add_is_non_mutating():
    base = ImportPaths().add("fmt")
    extended = base.add("os")
    assert len(base.paths) == 2
    assert extended.paths[: len(base.paths)] == base.paths


def test_add_skips_existing_paths():
    base = ImportPaths().add("fmt")
    extended = base.add("fmt", "os")
    assert extended.paths.count('"fmt"') == 1
    assert '"os"' in extended.paths


def test_blank_entries_are_kept():
    result = ImportPaths().add("a", "", "b")
    assert result.paths == ('"a"', "", '"b"', "")


def test_default_lists():
    assert IMPORT_LIST.paths[:4] == ('"context"', '"database/sql"', '"strings"', "")
    assert IMPORT_LIST.paths[-2:] == ('"gorm.io/plugin/dbresolver"', "")
    assert all(p == "" or (p.startswith('"') and p.endswith('"')) for p in IMPORT_LIST.paths)
    assert UNIT_TEST_IMPORT_LIST.paths[-3:] == ('"gorm.io/driver/sqlite"', '"gorm.io/gorm"', "")
    extended = IMPORT_LIST.add("context", "time")
    assert extended.paths[len(IMPORT_LIST.paths):] == ('"time"', "")