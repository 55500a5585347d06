from __future__ import annotations

import os
import threading
import time

import pytest
from sqlalchemy.exc import ArgumentError, OperationalError

from backend.db import create_db_engine, get_conn, init_engine, normalize_url


def test_init_engine_creates_users_table(engine):
    with get_conn(engine) as conn:
        cols = {r["name"]: r for r in conn.execute("PRAGMA table_info(users)").fetchall()}
    assert set(cols) == {"id", "name", "email"}
    assert cols["id"]["pk"] == 1
    assert cols["name"]["notnull"] == 1
    assert cols["email"]["notnull"] == 1


def test_engine_pool_is_bounded_at_five(engine):
    assert engine.pool.size() == 5
    assert engine.pool._max_overflow == 0


def test_connections_are_configured(engine):
    with get_conn(engine) as conn:
        assert conn.isolation_level is None
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"


def test_init_engine_is_idempotent(db_url):
    first = init_engine(db_url)
    with get_conn(first) as conn:
        conn.execute("INSERT INTO users (name, email) VALUES ('a', 'a@x.com')")
    first.dispose()

    second = init_engine(db_url)
    with get_conn(second) as conn:
        assert conn.execute("SELECT COUNT(1) AS c FROM users").fetchone()["c"] == 1
    second.dispose()


def test_init_engine_creates_parent_directory(tmp_path):
    target = tmp_path / "nested" / "dir" / "app.db"
    e = init_engine(f"sqlite:///{target}")
    try:
        assert os.path.isdir(tmp_path / "nested" / "dir")
        assert target.exists()
    finally:
        e.dispose()


def test_init_engine_fails_fast_on_other_backends():
    with pytest.raises(ValueError):
        init_engine("mysql://localhost/users")


def test_init_engine_fails_fast_on_garbage_url():
    with pytest.raises(ArgumentError):
        init_engine("not a url")


def test_init_engine_fails_when_database_cannot_open(tmp_path):
    # a directory is not a database file
    with pytest.raises(OperationalError):
        init_engine(f"sqlite:///{tmp_path}")


@pytest.mark.parametrize("url", ["sqlite://", "sqlite:///:memory:"])
def test_memory_url_becomes_shared_cache(url):
    u = normalize_url(url)
    assert u.database.startswith("file:users-mem-")
    assert u.query["mode"] == "memory"
    assert u.query["cache"] == "shared"
    assert u.query["uri"] == "true"


def test_memory_database_is_shared_across_connections():
    e = init_engine("sqlite://", pool_size=2)
    try:
        with get_conn(e) as a:
            a.execute("INSERT INTO users (name, email) VALUES ('m', 'm@x.com')")
            # second connection while the first is still checked out
            with get_conn(e) as b:
                assert a is not b
                assert b.execute("SELECT email FROM users").fetchone()["email"] == "m@x.com"
    finally:
        e.dispose()


def test_file_url_is_left_alone(tmp_path):
    u = normalize_url(f"sqlite:///{tmp_path / 'x.db'}")
    assert u.database == str(tmp_path / "x.db")


def test_idle_connection_is_reused(engine):
    with get_conn(engine) as c1:
        pass
    with get_conn(engine) as c2:
        pass
    assert c1 is c2
    assert engine.pool.checkedout() == 0


def test_checkout_waits_when_exhausted(tmp_path):
    e = create_db_engine(f"sqlite:///{tmp_path / 'cap.db'}", pool_size=1)
    acquired = threading.Event()
    release = threading.Event()
    order: list[str] = []

    def holder():
        with get_conn(e):
            order.append("holder")
            acquired.set()
            release.wait(5)

    def waiter():
        with get_conn(e):
            order.append("waiter")

    t1 = threading.Thread(target=holder)
    t1.start()
    assert acquired.wait(5)
    t2 = threading.Thread(target=waiter)
    t2.start()
    time.sleep(0.1)
    # waiter is queued, not failed
    assert order == ["holder"]
    release.set()
    t1.join(5)
    t2.join(5)
    assert order == ["holder", "waiter"]
    assert e.pool.checkedin() == 1
    e.dispose()


def test_open_transaction_is_rolled_back_on_return(engine):
    with get_conn(engine) as conn:
        conn.execute("BEGIN")
        conn.execute("INSERT INTO users (name, email) VALUES ('t', 't@x.com')")
    with get_conn(engine) as conn:
        assert not conn.in_transaction
        assert conn.execute("SELECT COUNT(1) AS c FROM users").fetchone()["c"] == 0
