from __future__ import annotations

# backend/db.py
import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import QueuePool

from . import settings
from .repository import user_repo

logger = logging.getLogger(__name__)


def _is_memory(url: URL) -> bool:
    return url.database in (None, "", ":memory:")


def normalize_url(database_url: str) -> URL:
    """
    解析 DATABASE_URL，只接受 SQLite。

    内存库改写成命名的 shared-cache 库，保证池里每个连接看到同一份数据。
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        raise ValueError(f"unsupported database url: {database_url}")
    if _is_memory(url):
        url = url.set(
            database=f"file:users-mem-{uuid.uuid4().hex}",
            query={"mode": "memory", "cache": "shared", "uri": "true"},
        )
    return url


def create_db_engine(database_url: str | None = None, pool_size: int = settings.POOL_SIZE) -> Engine:
    url = normalize_url(database_url or settings.get_database_url())
    file_backed = url.query.get("mode") != "memory"
    if file_backed and not url.database.startswith("file:"):
        # 确保目录存在
        os.makedirs(os.path.dirname(url.database) or ".", exist_ok=True)

    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=0,
        # 池满时排队等待，不超时
        pool_timeout=None,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        dbapi_connection.row_factory = sqlite3.Row
        dbapi_connection.execute("PRAGMA foreign_keys = ON;")
        if file_backed:
            dbapi_connection.execute("PRAGMA journal_mode = WAL;")

    return engine


@contextmanager
def get_conn(engine: Engine) -> Iterator[sqlite3.Connection]:
    """
    从连接池借出一个 sqlite3 连接，退出时归还（池会回滚未提交的事务）。
    """
    pooled = engine.raw_connection()
    try:
        yield pooled.driver_connection
    finally:
        pooled.close()


def init_engine(database_url: str | None = None, pool_size: int = settings.POOL_SIZE) -> Engine:
    """
    建连接池并建表。任何失败都直接抛出，服务不会启动。
    """
    engine = create_db_engine(database_url, pool_size)
    try:
        with get_conn(engine) as conn:
            user_repo.ensure_schema(conn)
    except Exception:
        engine.dispose()
        raise
    logger.info(f"database ready: {engine.url} (pool_size={pool_size})")
    return engine


def get_engine(request: Request) -> Engine:
    return request.app.state.engine
