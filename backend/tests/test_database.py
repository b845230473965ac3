"""End-to-end tests for Database against in-memory SQLite."""

import sqlite3
from collections.abc import Iterator
from unittest.mock import MagicMock, call, patch

import pytest

from sqlexpand import Database, ImmutableResultViolation, MalformedArguments, QueryResult
from sqlexpand.core.connect import ProductTypeEnum


@pytest.fixture
def db() -> Iterator[Database]:
    with Database.connect({"product_type": "sqlite", "database": ":memory:"}) as database:
        database("CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, active INTEGER)")
        database(
            "INSERT INTO users (name, active) VALUES ?",
            [["ann", True], ["bob", False], ["cid", True]],
        )
        yield database


def test_select_in_list(db: Database) -> None:
    res = db("SELECT name FROM users WHERE id IN (?) ORDER BY id", [1, 3])
    assert isinstance(res, QueryResult)
    assert [row["name"] for row in res] == ["ann", "cid"]


def test_booleans_bound_as_integers(db: Database) -> None:
    assert db("SELECT COUNT(*) FROM users WHERE active = ?", True).value() == 2


def test_update_with_set_clause(db: Database) -> None:
    res = db("UPDATE users SET ? WHERE id = ?", {"name": "bea", "active": False}, 2)
    assert res.affected_rows == 1
    assert db("SELECT name, active FROM users WHERE id = ?", 2).first() == {"name": "bea", "active": 0}


def test_insert_last_id(db: Database) -> None:
    res = db("INSERT INTO users (name, active) VALUES (?)", ["dan", 1])
    assert res.last_id == 4
    assert res.affected_rows == 1
    assert res.count() == 0


def test_question_mark_in_literal(db: Database) -> None:
    assert db("SELECT '?' AS q, ? AS n", 5).first() == {"q": "?", "n": 5}


def test_views(db: Database) -> None:
    res = db("SELECT id, name FROM users ORDER BY id")
    assert res.count() == 3
    assert res.first() == {"id": 1, "name": "ann"}
    assert res[2]["name"] == "cid"
    assert res.value() == 1
    assert res.all() == list(res)


def test_empty_result(db: Database) -> None:
    res = db("SELECT * FROM users WHERE id = ?", 99)
    assert res.first() is None
    assert res.value() is None
    assert res.count() == 0


def test_result_is_read_only(db: Database) -> None:
    res = db("SELECT id FROM users ORDER BY id")
    with pytest.raises(ImmutableResultViolation):
        res[0] = {"id": 5}
    with pytest.raises(ImmutableResultViolation):
        del res[0]
    assert res[0] == {"id": 1}


def test_malformed_arguments(db: Database) -> None:
    with pytest.raises(MalformedArguments):
        db("SELECT * FROM users WHERE id = ?", {"id": [1, 2]})
    with pytest.raises(MalformedArguments):
        db("SELECT * FROM users WHERE id = ? AND name = ?", 1)


def test_driver_error_passes_through(db: Database) -> None:
    with pytest.raises(sqlite3.OperationalError):
        db("SELECT * FROM missing_table WHERE id = ?", 1)


def test_transaction_commits(db: Database) -> None:
    def work(tx: Database) -> int:
        tx("INSERT INTO users (name, active) VALUES (?)", ["eve", 1])
        return tx("SELECT COUNT(*) FROM users").value()

    assert db.transaction(work) == 4
    assert db("SELECT COUNT(*) FROM users").value() == 4


def test_transaction_rolls_back_partial_work(db: Database) -> None:
    def work(tx: Database) -> None:
        tx("INSERT INTO users (name, active) VALUES (?)", ["eve", 1])
        raise LookupError("stop")

    with pytest.raises(LookupError, match="stop"):
        db.transaction(work)
    assert db("SELECT COUNT(*) FROM users WHERE name = ?", "eve").value() == 0
    assert db.conn.in_transaction is False


def test_transaction_reraises_driver_error(db: Database) -> None:
    def work(tx: Database) -> None:
        tx("DELETE FROM users WHERE id = ?", 1)
        tx("INSERT INTO users (id, name) VALUES (?)", [2, "dup"])

    with pytest.raises(sqlite3.IntegrityError):
        db.transaction(work)
    assert db("SELECT COUNT(*) FROM users").value() == 3


def test_str_rendering(db: Database) -> None:
    text = str(db("SELECT name FROM users WHERE id = ?", 1))
    assert "Results        : 1" in text
    assert "SELECT name FROM users WHERE id = ?" in text
    assert "{'name': 'ann'}" in text


@patch("sqlexpand.core.connect.pymysql.connect")
def test_mysql_uses_pyformat_and_begin(mock_connect: MagicMock) -> None:
    conn = mock_connect.return_value
    cur = conn.cursor.return_value
    cur.rowcount = 1
    cur.lastrowid = 0
    db = Database.connect(
        {"product_type": "mysql", "host": "h", "database": "d", "username": "u"}
    )
    db("UPDATE t SET ? WHERE id IN (?) AND note LIKE '5%'", {"a": 1}, [2, 3])
    cur.execute.assert_called_once_with(
        "UPDATE t SET `a` = %s WHERE id IN (%s, %s) AND note LIKE '5%%'", (1, 2, 3)
    )
    db.transaction(lambda tx: None)
    conn.begin.assert_called_once()
    conn.commit.assert_called_once()


def test_postgres_quotes_identifiers() -> None:
    conn = MagicMock()
    conn.cursor.return_value.rowcount = 1
    db = Database(conn, ProductTypeEnum.POSTGRES)
    db("UPDATE t SET ?", {"a": 1})
    conn.cursor.return_value.execute.assert_called_once_with('UPDATE t SET "a" = %s', (1,))
    db.transaction(lambda tx: None)
    conn.execute.assert_called_once_with("BEGIN")
    conn.begin.assert_not_called()
    conn.commit.assert_called_once()


def test_postgres_transaction_rolls_back_only_its_own_work() -> None:
    conn = MagicMock()
    db = Database(conn, ProductTypeEnum.POSTGRES)

    def work(tx: Database) -> None:
        tx("INSERT INTO t (a) VALUES (?)", 1)
        raise LookupError("stop")

    with pytest.raises(LookupError):
        db.transaction(work)
    assert conn.method_calls[0] == call.execute("BEGIN")
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()


@patch("sqlexpand.core.connect.psycopg.connect")
def test_postgres_connection_autocommits(mock_connect: MagicMock) -> None:
    Database.connect({"product_type": "postgres", "host": "h", "database": "d", "username": "u"})
    assert mock_connect.call_args.kwargs["autocommit"] is True


def test_write_outside_transaction_is_committed(tmp_path) -> None:
    path = str(tmp_path / "app.db")
    with Database.connect({"product_type": "sqlite", "database": path}) as writer:
        writer("CREATE TABLE t (a INTEGER)")
        writer("INSERT INTO t (a) VALUES (?)", [1, 2])
        with Database.connect({"product_type": "sqlite", "database": path}) as reader:
            assert reader("SELECT COUNT(*) FROM t").value() == 2


def test_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from sqlexpand.core import config

    monkeypatch.setattr(
        config,
        "settings",
        config.Settings(_env_file=None, DB_PRODUCT_TYPE="sqlite", DB_NAME=":memory:"),
    )
    with Database.from_settings() as database:
        assert database.product_type == ProductTypeEnum.SQLITE
        assert database("SELECT ? + ?", 1, 2).value() == 3
