"""Relational storage access.

A :class:`Database` owns one SQLAlchemy engine and its bounded connection
pool. Callers hand it SQL text with named parameters; nothing in the
application keeps a module-level engine, so tests can build their own.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from flask import current_app
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    event,
    func,
    text,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

EXTENSION_KEY = "taskboard_db"

metadata = MetaData()

tasks_table = Table(
    "tasks",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("title", String(100), nullable=False),
    Column("date", String(10), nullable=False),
    Column("startTime", String(5), nullable=False),
    Column("endTime", String(5), nullable=False),
    Column("location", String(100), nullable=True),
    Column("category", String(50), nullable=False),
    Column("isStaticSchedule", Boolean, nullable=False, default=False),
    Column("status", String(16), nullable=False, default="pending"),
    Column("priority", String(16), nullable=False, default="medium"),
    Column("duration", Integer, nullable=False),
)

users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("phone", String(20), nullable=True),
    Column("organization", String(100), nullable=True),
    Column("plan", String(16), nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)


@dataclass
class QueryResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0
    lastrowid: Optional[int] = None

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


def _run(conn: Connection, query: str, params: Optional[Mapping[str, Any]]) -> QueryResult:
    result = conn.execute(text(query), dict(params or {}))
    if result.returns_rows:
        rows = [dict(row) for row in result.mappings()]
        return QueryResult(rows=rows, rowcount=len(rows))
    return QueryResult(rowcount=result.rowcount, lastrowid=getattr(result, "lastrowid", None))


class Transaction:
    """Executor bound to one connection inside an open transaction."""

    def __init__(self, conn: Connection):
        self._conn = conn

    def execute(self, query: str, params: Optional[Mapping[str, Any]] = None) -> QueryResult:
        return _run(self._conn, query, params)


class Database:
    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: int = 30,
        echo: bool = False,
    ):
        self.url = url
        self.engine: Engine = create_engine(url, echo=echo, **self._pool_options(url, pool_size, max_overflow, pool_timeout))
        event.listen(self.engine, "connect", self._on_connect)
        event.listen(self.engine, "checkout", self._on_checkout)
        event.listen(self.engine, "checkin", self._on_checkin)

    @staticmethod
    def _pool_options(url: str, pool_size: int, max_overflow: int, pool_timeout: int) -> Dict[str, Any]:
        if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") == "sqlite:"):
            # One shared connection, otherwise every checkout sees an empty database
            return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        options: Dict[str, Any] = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_pre_ping": True,
        }
        if url.startswith("sqlite"):
            options["connect_args"] = {"check_same_thread": False}
        return options

    @staticmethod
    def _on_connect(dbapi_connection, connection_record):
        logger.debug("New connection established in the pool")

    @staticmethod
    def _on_checkout(dbapi_connection, connection_record, connection_proxy):
        logger.debug("Connection checked out from the pool")

    @staticmethod
    def _on_checkin(dbapi_connection, connection_record):
        logger.debug("Connection released back to the pool")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Database":
        return cls(
            config["DATABASE_URL"],
            pool_size=config.get("DB_POOL_SIZE", 10),
            max_overflow=config.get("DB_MAX_OVERFLOW", 0),
            pool_timeout=config.get("DB_POOL_TIMEOUT", 30),
            echo=config.get("DB_ECHO", False),
        )

    def execute(self, query: str, params: Optional[Mapping[str, Any]] = None) -> QueryResult:
        """Run one statement in its own transaction and return rows or the affected count."""
        with self.engine.begin() as conn:
            return _run(conn, query, params)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        with self.engine.begin() as conn:
            yield Transaction(conn)

    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def init_app(app, database: Optional[Database] = None) -> Database:
    db = database or Database.from_config(app.config)
    if app.config.get("DB_CREATE_SCHEMA", True):
        db.create_schema()
    app.extensions[EXTENSION_KEY] = db
    app.logger.info("Database ready (%s)", db.engine.url.render_as_string(hide_password=True))
    return db


def get_db() -> Database:
    return current_app.extensions[EXTENSION_KEY]
