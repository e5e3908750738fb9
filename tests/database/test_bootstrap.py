from __future__ import annotations

from vacation_tracker.database.bootstrap import SCHEMA_PATH, _strip_create_db_and_use, iter_sql_statements


def test_splitter_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"c;d\");\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_schema_drops_database_selection():
    sql = _strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))

    assert "USE vacation_db" not in sql
    assert "CREATE DATABASE" not in sql.upper()


def test_schema_defines_all_tables():
    statements = list(iter_sql_statements(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))))
    created = [s.split("(")[0].split()[-1] for s in statements if s.upper().startswith("CREATE TABLE")]

    assert created == ["users", "vacation_requests", "settings"]
