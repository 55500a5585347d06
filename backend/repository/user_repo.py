from __future__ import annotations

from sqlite3 import Connection
from typing import Optional


_COLUMNS = "id, name, email"


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id    INTEGER PRIMARY KEY AUTOINCREMENT,
            name  TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE
        )
        """
    )


def list_all(conn: Connection):
    return conn.execute(f"SELECT {_COLUMNS} FROM users ORDER BY id").fetchall()


def insert(conn: Connection, name: str, email: str) -> int:
    cur = conn.execute("INSERT INTO users (name, email) VALUES (?, ?)", (name, email))
    return int(cur.lastrowid)


def get_one(conn: Connection, user_id: int):
    return conn.execute(f"SELECT {_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()


def update(conn: Connection, user_id: int, name: Optional[str], email: Optional[str]) -> int:
    # None 表示保留原值
    cur = conn.execute(
        "UPDATE users "
        "SET name = COALESCE(?, name), "
        "    email = COALESCE(?, email) "
        "WHERE id = ?",
        (name, email, user_id),
    )
    return cur.rowcount


def delete(conn: Connection, user_id: int) -> int:
    cur = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
    return cur.rowcount
