"""
SQLite implementation of the persistence gateway.

One table per entity kind, one column per field, plus an autoincrement
``seq`` column that keeps listings in insertion order.
"""

from __future__ import annotations

from dataclasses import replace
import logging
import os
import sqlite3
from typing import Dict, List, Optional, TypeVar
from uuid import uuid4

from motorshop.domain import EntityKind

from . import codec
from .interface import EntityGateway, Gateway, GatewayError, LiveList

LOG = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA_VERSION = "1"

TABLES: Dict[EntityKind, str] = {
    EntityKind.COMPANY: "companies",
    EntityKind.MOTOR: "motors",
    EntityKind.JOB: "jobs",
}

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS companies (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        email TEXT,
        phone TEXT,
        address TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS motors (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT NOT NULL UNIQUE,
        company_id TEXT NOT NULL REFERENCES companies(id),
        motor_id TEXT NOT NULL,
        manufacturer TEXT,
        model TEXT,
        serial_number TEXT,
        type TEXT NOT NULL,
        voltage TEXT,
        amperage TEXT,
        power TEXT,
        phase INTEGER,
        frequency TEXT,
        rpm TEXT,
        condition TEXT NOT NULL,
        location TEXT,
        technical_notes TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS jobs (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT NOT NULL UNIQUE,
        job_number TEXT NOT NULL UNIQUE,
        company_id TEXT NOT NULL REFERENCES companies(id),
        motor_id TEXT NOT NULL REFERENCES motors(id),
        description TEXT NOT NULL,
        status TEXT NOT NULL,
        priority TEXT NOT NULL,
        estimated_cost REAL,
        labor_rate REAL,
        labor_hours REAL,
        parts_cost REAL,
        start_date TEXT,
        due_date TEXT NOT NULL,
        technician_id TEXT,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_motors_company ON motors(company_id)",
    "CREATE INDEX IF NOT EXISTS idx_jobs_company ON jobs(company_id)",
    "CREATE INDEX IF NOT EXISTS idx_jobs_motor ON jobs(motor_id)",
    """
    CREATE TABLE IF NOT EXISTS metadata (
        key TEXT PRIMARY KEY,
        value TEXT
    )
    """,
)


class SqliteEntityGateway(EntityGateway[T]):
    """Storage for one entity kind inside a shared SQLite connection."""

    def __init__(self, conn: sqlite3.Connection, kind: EntityKind):
        self.kind = EntityKind(kind)
        self._conn = conn
        self._table = TABLES[self.kind]
        self._columns = codec.columns(self.kind)
        self._listing: LiveList[T] = LiveList(self.kind, self._load())

    def _record_to_row(self, record: T) -> tuple:
        """Convert record to database row tuple."""
        return tuple(codec.to_row(self.kind, record).values())

    def _row_to_record(self, row: sqlite3.Row) -> T:
        """Convert database row to record."""
        return codec.from_row(self.kind, row)

    def _load(self) -> List[T]:
        cursor = self._conn.cursor()
        cursor.execute(
            f"SELECT {', '.join(self._columns)} FROM {self._table} ORDER BY seq")
        return [self._row_to_record(row) for row in cursor.fetchall()]

    async def create(self, record: T) -> T:
        stored = replace(record, id=str(uuid4()))
        placeholders = ", ".join("?" for _ in self._columns)
        try:
            self._conn.execute(
                f"INSERT INTO {self._table} ({', '.join(self._columns)}) "
                f"VALUES ({placeholders})",
                self._record_to_row(stored))
            self._conn.commit()
        except sqlite3.Error as exc:
            try:
                self._conn.rollback()
            except sqlite3.Error as rollback_exc:
                LOG.warning("Rollback after failed %s insert failed: %s",
                            self.kind.value, rollback_exc)
            raise GatewayError(f"Could not create {self.kind.value}", exc) from exc

        self._listing._append(stored)  # pylint: disable=protected-access
        LOG.info("Created %s %s in %s", self.kind.value, stored.id, self._table)
        return stored

    def listing(self) -> LiveList[T]:
        return self._listing

    def reload(self) -> None:
        try:
            records = self._load()
        except sqlite3.Error as exc:
            raise GatewayError(f"Could not list {self._table}", exc) from exc
        self._listing._replace(records)  # pylint: disable=protected-access


class SqliteGateway(Gateway):
    """
    SQLite-backed gateway.

    Foreign keys are enforced by SQLite, so a motor or job that points at a
    missing company surfaces as a GatewayError even if validation was
    skipped.
    """

    def __init__(self, db_path: str):
        """
        Initialize gateway.

        Args:
            db_path: Path to SQLite database file (":memory:" for a scratch db)

        Raises:
            GatewayError: If the file holds a different schema version
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._conn: Optional[sqlite3.Connection] = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._init_schema()
        version = self.schema_version()
        if version != SCHEMA_VERSION:
            self.close()
            raise GatewayError(
                f"{db_path} has schema version {version}, expected {SCHEMA_VERSION}")
        self.companies = SqliteEntityGateway(self._conn, EntityKind.COMPANY)
        self.motors = SqliteEntityGateway(self._conn, EntityKind.MOTOR)
        self.jobs = SqliteEntityGateway(self._conn, EntityKind.JOB)

    def _ensure_db_dir(self):
        """Create database directory if it doesn't exist."""
        if self.db_path == ":memory:":
            return
        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    def _init_schema(self):
        """Create database schema if it doesn't exist."""
        cursor = self._conn.cursor()
        for statement in SCHEMA:
            cursor.execute(statement)

        cursor.execute("SELECT COUNT(*) FROM metadata WHERE key = 'schema_version'")
        if cursor.fetchone()[0] == 0:
            cursor.execute(
                "INSERT INTO metadata (key, value) VALUES (?, ?)",
                ("schema_version", SCHEMA_VERSION))

        self._conn.commit()
        LOG.debug("sqlite gateway ready at %s", self.db_path)

    def schema_version(self) -> str:
        cursor = self._conn.cursor()
        cursor.execute("SELECT value FROM metadata WHERE key = 'schema_version'")
        row = cursor.fetchone()
        return row[0] if row else SCHEMA_VERSION

    async def refresh(self) -> None:
        for gateway in (self.companies, self.motors, self.jobs):
            gateway.reload()

    def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
