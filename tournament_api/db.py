"""
Database access: bounded connection pool, probes, schema bootstrap and seed data.
MySQL through PyMySQL in deployment; SQLite for local runs and tests.
"""
import logging
import sqlite3
from contextlib import closing, contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pymysql
from sqlalchemy.pool import QueuePool

from tournament_api.core.errors import DatabaseUnavailable
from tournament_api.core.settings import Settings

logger = logging.getLogger(__name__)

# ----- Schema -----

MYSQL_CREATE_TABLES = (
    """
CREATE TABLE IF NOT EXISTS GroupMatches (
  MatchID INT AUTO_INCREMENT PRIMARY KEY,
  MatchDate DATE NOT NULL,
  Team1 VARCHAR(100) NOT NULL,
  Team2 VARCHAR(100) NOT NULL,
  Venue VARCHAR(100) NULL,
  Result VARCHAR(100) NULL,
  Stage VARCHAR(50) NULL,
  INDEX idx_match_date (MatchDate)
);
""",
    """
CREATE TABLE IF NOT EXISTS Standings (
  TeamID INT AUTO_INCREMENT PRIMARY KEY,
  TeamName VARCHAR(100) NOT NULL UNIQUE,
  MatchesPlayed INT NOT NULL DEFAULT 0,
  Wins INT NOT NULL DEFAULT 0,
  Losses INT NOT NULL DEFAULT 0,
  Points INT NOT NULL DEFAULT 0,
  GoalDifference INT NOT NULL DEFAULT 0
);
""",
    """
CREATE TABLE IF NOT EXISTS PlayerStats (
  PlayerID INT AUTO_INCREMENT PRIMARY KEY,
  PlayerName VARCHAR(100) NOT NULL,
  Team VARCHAR(100) NULL,
  Matches INT NOT NULL DEFAULT 0,
  Runs INT NOT NULL DEFAULT 0,
  Wickets INT NOT NULL DEFAULT 0,
  Catches INT NOT NULL DEFAULT 0
);
""",
)

SQLITE_CREATE_TABLES = (
    """
CREATE TABLE IF NOT EXISTS GroupMatches (
  MatchID INTEGER PRIMARY KEY AUTOINCREMENT,
  MatchDate TEXT NOT NULL,
  Team1 TEXT NOT NULL,
  Team2 TEXT NOT NULL,
  Venue TEXT,
  Result TEXT,
  Stage TEXT
);
""",
    """
CREATE TABLE IF NOT EXISTS Standings (
  TeamID INTEGER PRIMARY KEY AUTOINCREMENT,
  TeamName TEXT NOT NULL UNIQUE,
  MatchesPlayed INTEGER NOT NULL DEFAULT 0,
  Wins INTEGER NOT NULL DEFAULT 0,
  Losses INTEGER NOT NULL DEFAULT 0,
  Points INTEGER NOT NULL DEFAULT 0,
  GoalDifference INTEGER NOT NULL DEFAULT 0
);
""",
    """
CREATE TABLE IF NOT EXISTS PlayerStats (
  PlayerID INTEGER PRIMARY KEY AUTOINCREMENT,
  PlayerName TEXT NOT NULL,
  Team TEXT,
  Matches INTEGER NOT NULL DEFAULT 0,
  Runs INTEGER NOT NULL DEFAULT 0,
  Wickets INTEGER NOT NULL DEFAULT 0,
  Catches INTEGER NOT NULL DEFAULT 0
);
""",
)

# (table, columns, rows). Inserted only into an empty table.
SEED_DATA: Tuple[Tuple[str, Tuple[str, ...], List[tuple]], ...] = (
    (
        "GroupMatches",
        ("MatchDate", "Team1", "Team2", "Venue", "Stage"),
        [
            ("2025-09-01", "India", "Pakistan", "Dubai", "Group A"),
            ("2025-09-02", "Sri Lanka", "Bangladesh", "Abu Dhabi", "Group B"),
            ("2025-09-03", "Afghanistan", "Nepal", "Sharjah", "Group A"),
        ],
    ),
    (
        "Standings",
        ("TeamName", "MatchesPlayed", "Wins", "Losses", "Points", "GoalDifference"),
        [
            ("India", 2, 2, 0, 4, 15),
            ("Pakistan", 2, 1, 1, 2, 5),
            ("Sri Lanka", 2, 1, 1, 2, -3),
            ("Bangladesh", 2, 0, 2, 0, -17),
        ],
    ),
    (
        "PlayerStats",
        ("PlayerName", "Team", "Matches", "Runs", "Wickets", "Catches"),
        [
            ("Virat Kohli", "India", 2, 156, 0, 3),
            ("Babar Azam", "Pakistan", 2, 128, 0, 2),
            ("Wanindu Hasaranga", "Sri Lanka", 2, 45, 5, 1),
        ],
    ),
)


@dataclass(frozen=True)
class Dialect:
    name: str
    paramstyle: str
    create_tables: Sequence[str]
    read_only_query: str

    def sql(self, statement: str) -> str:
        """Queries are written with %s placeholders; rewrite them for qmark drivers."""
        if self.paramstyle == "qmark":
            return statement.replace("%s", "?")
        return statement


MYSQL = Dialect("mysql", "format", MYSQL_CREATE_TABLES, "SELECT @@global.read_only AS read_only")
SQLITE = Dialect("sqlite", "qmark", SQLITE_CREATE_TABLES, "PRAGMA query_only")

DIALECTS: Dict[str, Dialect] = {d.name: d for d in (MYSQL, SQLITE)}


def _first_value(row: Any) -> Any:
    if row is None:
        return None
    if isinstance(row, dict):
        return next(iter(row.values()), None)
    return row[0]


def _execute(cur, statement: str, params: Optional[Sequence[Any]] = None) -> None:
    if params:
        cur.execute(statement, tuple(params))
    else:
        cur.execute(statement)


def mysql_ssl_options(settings: Settings) -> Optional[dict]:
    """PyMySQL ssl= argument for the configured mode. None disables TLS."""
    mode = settings.db_ssl_mode
    if mode == "disable":
        return None
    opts: Dict[str, Any] = {"check_hostname": mode == "verify-full"}
    if settings.db_ssl_ca:
        opts["ca"] = settings.db_ssl_ca
    elif mode in ("verify-ca", "verify-full"):
        logger.warning("DB_SSL_MODE=%s without DB_SSL_CA; server certificate will not be verified", mode)
    return opts


class Database:
    """Connection pool handle. Created once per process and kept on app.state."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.dialect = DIALECTS[settings.db_driver]
        self.pool: Optional[QueuePool] = None

    @property
    def is_established(self) -> bool:
        return self.pool is not None

    def _mysql_kwargs(self, include_database: bool = True) -> dict:
        s = self.settings
        kwargs = dict(
            host=s.db_host,
            port=s.db_port,
            user=s.db_user,
            password=s.db_password,
            connect_timeout=s.db_connect_timeout,
            ssl=mysql_ssl_options(s),
            charset="utf8mb4",
            cursorclass=pymysql.cursors.DictCursor,
        )
        if include_database:
            kwargs["database"] = s.db_name
        return kwargs

    def _create_connection(self):
        if self.dialect is SQLITE:
            path = self.settings.sqlite_path
            path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(
                str(path),
                timeout=self.settings.db_connect_timeout,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            return conn
        return pymysql.connect(**self._mysql_kwargs())

    def ensure_database_exists(self) -> None:
        """Create the MySQL database if it does not exist (connect without database first)."""
        if self.dialect is not MYSQL:
            return
        # Escape backticks in identifier for safe SQL
        db_name = self.settings.db_name.replace("`", "``")
        conn = pymysql.connect(**self._mysql_kwargs(include_database=False))
        try:
            with conn.cursor() as cur:
                cur.execute("CREATE DATABASE IF NOT EXISTS `%s`" % db_name)
            conn.commit()
        finally:
            conn.close()

    def connect(self) -> None:
        """Build the pool and check out one connection to prove the database is reachable.

        max_overflow=0 bounds concurrent connections at db_pool_size; further
        checkouts wait up to db_pool_timeout seconds for a free connection.
        """
        pool = QueuePool(
            self._create_connection,
            pool_size=self.settings.db_pool_size,
            max_overflow=0,
            timeout=self.settings.db_pool_timeout,
        )
        try:
            conn = pool.connect()
            conn.close()
        except Exception:
            pool.dispose()
            raise
        self.pool = pool
        logger.info(
            "Database pool ready (driver=%s, pool_size=%s)",
            self.dialect.name,
            self.settings.db_pool_size,
        )

    def close(self) -> None:
        if self.pool is not None:
            self.pool.dispose()
            self.pool = None
            logger.info("Database pool closed")

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Check out a pooled connection; commit on success, roll back and re-raise on error."""
        if self.pool is None:
            raise DatabaseUnavailable()
        conn = self.pool.connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            try:
                conn.rollback()
            except Exception:
                logger.warning("Rollback failed; discarding connection", exc_info=True)
                conn.invalidate()
            raise
        finally:
            conn.close()

    def fetch_all(self, statement: str, params: Optional[Sequence[Any]] = None) -> List[dict]:
        with self.connection() as conn, closing(conn.cursor()) as cur:
            _execute(cur, self.dialect.sql(statement), params)
            return [dict(row) for row in cur.fetchall()]

    def execute(self, statement: str, params: Optional[Sequence[Any]] = None) -> int:
        """Run a statement that returns no rows; returns the affected row count."""
        with self.connection() as conn, closing(conn.cursor()) as cur:
            _execute(cur, self.dialect.sql(statement), params)
            return cur.rowcount

    def insert(self, statement: str, params: Sequence[Any]) -> int:
        """Run an INSERT and return the generated row id."""
        with self.connection() as conn, closing(conn.cursor()) as cur:
            _execute(cur, self.dialect.sql(statement), params)
            return int(cur.lastrowid)

    def probe(self) -> bool:
        """Liveness probe (SELECT 1) followed by read-only detection. Returns the read-only flag."""
        with self.connection() as conn, closing(conn.cursor()) as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
            cur.execute(self.dialect.read_only_query)
            return bool(_first_value(cur.fetchone()))

    def pool_status(self) -> dict:
        if self.pool is None:
            return {"established": False}
        return {
            "established": True,
            "size": self.pool.size(),
            "checked_out": self.pool.checkedout(),
            "max_size": self.settings.db_pool_size,
        }


def init_db(database: Database) -> Dict[str, int]:
    """Create tables if not exists, then seed every empty table.

    Idempotent: a table that already has rows is left untouched. Returns the
    number of rows seeded per table.
    """
    seeded: Dict[str, int] = {}
    with database.connection() as conn, closing(conn.cursor()) as cur:
        for statement in database.dialect.create_tables:
            cur.execute(statement)
        for table, columns, rows in SEED_DATA:
            cur.execute(f"SELECT COUNT(*) AS total FROM {table}")
            if _first_value(cur.fetchone()):
                seeded[table] = 0
                continue
            placeholders = ", ".join(["%s"] * len(columns))
            cur.executemany(
                database.dialect.sql(f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"),
                rows,
            )
            seeded[table] = len(rows)
            logger.info("Seeded %s with %d rows", table, len(rows))
    return seeded
