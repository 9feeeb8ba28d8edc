import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from utils.errors import ConflictError, StorageError
from .schema import SCHEMA_SQL, INDEXES_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".wordmine"
DB_PATH = CONFIG_DIR / "wordmine.db"
BUSY_TIMEOUT_SECONDS = 30.0

def init_db():
    """Initialize the database by creating tables and indexes if they don't exist."""
    CONFIG_DIR.mkdir(exist_ok=True)
    with get_conn() as conn:
        conn.executescript(SCHEMA_SQL)
        conn.executescript(INDEXES_SQL)
        ensure_word_scheduling_columns(conn)
        ensure_sentence_source(conn)
        ensure_schema_version(conn)
        conn.commit()

def ensure_word_scheduling_columns(conn: sqlite3.Connection) -> None:
    """Ensure words table has the interval and review anchor columns for existing installs."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA table_info(words)")
    columns = {row[1] for row in cursor.fetchall()}
    if "date_first_reviewed" not in columns:
        cursor.execute("ALTER TABLE words ADD COLUMN date_first_reviewed TEXT")
    if "last_reviewed_at" not in columns:
        cursor.execute("ALTER TABLE words ADD COLUMN last_reviewed_at TEXT")
    if "interval_days" not in columns:
        cursor.execute("ALTER TABLE words ADD COLUMN interval_days INTEGER NOT NULL DEFAULT 0")

def ensure_sentence_source(conn: sqlite3.Connection) -> None:
    """Ensure sentences table has the source column."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA table_info(sentences)")
    columns = {row[1] for row in cursor.fetchall()}
    if "source" not in columns:
        cursor.execute("ALTER TABLE sentences ADD COLUMN source TEXT NOT NULL DEFAULT ''")

def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0

def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")

def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        set_schema_version(conn, SCHEMA_VERSION)

@contextmanager
def get_conn():
    """Context manager for SQLite connection, using row_factory for dict-like rows."""
    conn = sqlite3.connect(DB_PATH, timeout=BUSY_TIMEOUT_SECONDS, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()

def get_db():
    """FastAPI dependency that yields a DB connection and closes it afterwards."""
    with get_conn() as conn:
        yield conn

@contextmanager
def transaction(conn: sqlite3.Connection):
    """Run the body as one atomic unit: commit on success, roll back on any exception.

    Opens a write-locking ``BEGIN IMMEDIATE`` transaction so concurrent writers
    are serialized by SQLite. When the connection is already inside a
    transaction a savepoint is used instead, so the body still commits or
    rolls back as a whole.
    """
    nested = conn.in_transaction
    try:
        if nested:
            conn.execute("SAVEPOINT wordmine_tx")
        else:
            conn.execute("BEGIN IMMEDIATE")
    except sqlite3.Error as exc:
        raise StorageError(f"Could not start transaction: {exc}") from exc

    try:
        yield conn
    except BaseException as exc:
        _rollback(conn, nested)
        if isinstance(exc, sqlite3.IntegrityError):
            raise ConflictError(f"Integrity constraint violated: {exc}") from exc
        if isinstance(exc, sqlite3.Error):
            raise StorageError(f"Transaction failed: {exc}") from exc
        raise

    try:
        if nested:
            conn.execute("RELEASE SAVEPOINT wordmine_tx")
        else:
            conn.commit()
    except sqlite3.Error as exc:
        _rollback(conn, nested)
        raise StorageError(f"Could not commit transaction: {exc}") from exc

def _rollback(conn: sqlite3.Connection, nested: bool) -> None:
    if nested:
        conn.execute("ROLLBACK TO SAVEPOINT wordmine_tx")
        conn.execute("RELEASE SAVEPOINT wordmine_tx")
    else:
        conn.rollback()
    logger.info("Transaction rolled back")
