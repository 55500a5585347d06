from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from ..db import get_conn
from ..domain.users import CreateUser, UpdateUser, User
from ..errors import StorageError, UserNotFound
from ..repository import user_repo


@contextmanager
def _conn(engine: Engine) -> Iterator[sqlite3.Connection]:
    """Borrow a pooled connection; any driver or pool error becomes StorageError."""
    try:
        with get_conn(engine) as conn:
            yield conn
    except sqlite3.Error as e:
        raise StorageError(str(e)) from e
    except SQLAlchemyError as e:
        orig = e.orig if isinstance(e, DBAPIError) else None
        raise StorageError(str(orig or e)) from e


def _fetch(conn: sqlite3.Connection, user_id: int) -> User:
    row = user_repo.get_one(conn, user_id)
    if row is None:
        raise UserNotFound()
    return User.from_row(row)


def list_users(engine: Engine) -> list[User]:
    with _conn(engine) as conn:
        return [User.from_row(r) for r in user_repo.list_all(conn)]


def create_user(engine: Engine, payload: CreateUser) -> User:
    with _conn(engine) as conn:
        new_id = user_repo.insert(conn, payload.name, payload.email)
        # 回读不在事务内：插入成功而回读失败时，调用方看到 500
        row = user_repo.get_one(conn, new_id)
        if row is None:
            raise StorageError(f"inserted user {new_id} could not be read back")
        return User.from_row(row)


def get_user(engine: Engine, user_id: int) -> User:
    with _conn(engine) as conn:
        return _fetch(conn, user_id)


def update_user(engine: Engine, user_id: int, payload: UpdateUser) -> User:
    with _conn(engine) as conn:
        # id 不存在时 UPDATE 影响 0 行，由随后的回读报 not found
        user_repo.update(conn, user_id, payload.name, payload.email)
        return _fetch(conn, user_id)


def delete_user(engine: Engine, user_id: int) -> None:
    with _conn(engine) as conn:
        if user_repo.delete(conn, user_id) == 0:
            raise UserNotFound()
