"""
Document store utilities and connection management
Supports both SQLite (local development) and PostgreSQL (production)

Records are schemaless JSON documents grouped into named collections
("todos", "gym_logs", "finance", ...). Every backend exposes the same
collection-scoped operations: add, get, query and delete.

Usage:
    # SQLite (default for local dev, uses USE_SQLITE=1 env var)
    store = get_store()

    # PostgreSQL (production, uses DATABASE_URL env var)
    store = get_store()  # Automatically uses PostgreSQL if DATABASE_URL is set
"""

import json
import logging
import os
import re
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

from .errors import StorageError

# Try to import psycopg2 for PostgreSQL support
try:
    import psycopg2
    import psycopg2.extras
    POSTGRES_AVAILABLE = True
except ImportError:
    POSTGRES_AVAILABLE = False


logger = logging.getLogger("mitra.store")

# Field names are interpolated into JSON paths, so keep them to identifiers
_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_field(name: str) -> str:
    if not _FIELD_RE.match(name):
        raise StorageError(f"Invalid field name: {name!r}")
    return name


class DocumentStoreBase(ABC):
    """Abstract base class for collection-scoped document operations"""

    @abstractmethod
    def get_connection(self):
        """Get a database connection"""
        pass

    @abstractmethod
    def add(self, collection: str, record: Dict[str, Any]) -> int:
        """Insert a record into a collection and return its id"""
        pass

    @abstractmethod
    def get(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        """Fetch a single record by id"""
        pass

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Return records of a collection matching equality filters.

        Without order_by, records come back in insertion order.
        """
        pass

    @abstractmethod
    def delete(self, collection: str, record_id: int) -> bool:
        """Delete a record; returns False if it did not exist"""
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Check the backend is reachable"""
        pass

    @staticmethod
    def to_record(record_id: Any, data: Any) -> Dict[str, Any]:
        """Merge a stored document with its id"""
        if isinstance(data, str):
            data = json.loads(data)
        return {"id": record_id, **(data or {})}


class SQLiteDocumentStore(DocumentStoreBase):
    """SQLite document store for local development"""

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS documents (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            collection TEXT NOT NULL,
            data TEXT NOT NULL,
            created_at TEXT DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now', 'utc'))
        );
        CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection);
    """

    def __init__(self, db_path: Optional[Path] = None):
        if db_path is None:
            db_path = Path(__file__).parent.parent.parent / "data" / "database" / "mitra.db"

        self.db_path = Path(db_path)

        if not self.db_path.exists():
            raise FileNotFoundError(
                f"Database not found at {self.db_path}. "
                "Run 'python scripts/init_db.py' to create it."
            )

    @classmethod
    def initialize(cls, db_path: Path) -> 'SQLiteDocumentStore':
        """Create the database file and schema if needed, then open it"""
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path)
        try:
            conn.executescript(cls.SCHEMA)
            conn.commit()
        finally:
            conn.close()
        return cls(db_path)

    @contextmanager
    def get_connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def add(self, collection: str, record: Dict[str, Any]) -> int:
        with self.get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO documents (collection, data) VALUES (?, ?)",
                (collection, json.dumps(record, default=str)),
            )
            conn.commit()
            logger.debug("Added %s/%s", collection, cursor.lastrowid)
            return cursor.lastrowid

    def get(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT id, data FROM documents WHERE collection = ? AND id = ?",
                (collection, record_id),
            ).fetchone()
            return self.to_record(row["id"], row["data"]) if row else None

    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        conditions = ["collection = ?"]
        params: List[Any] = [collection]

        for field_name, value in (filters or {}).items():
            path = f"'$.{_check_field(field_name)}'"
            if value is None:
                conditions.append(f"json_extract(data, {path}) IS NULL")
            else:
                conditions.append(f"json_extract(data, {path}) = ?")
                params.append(value)

        direction = "DESC" if descending else "ASC"
        if order_by:
            order_clause = f"json_extract(data, '$.{_check_field(order_by)}') {direction}, id {direction}"
        else:
            order_clause = "id ASC"

        query = f"""
            SELECT id, data FROM documents
            WHERE {" AND ".join(conditions)}
            ORDER BY {order_clause}
        """
        if limit is not None:
            query += " LIMIT ?"
            params.append(int(limit))

        with self.get_connection() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
            return [self.to_record(row["id"], row["data"]) for row in rows]

    def delete(self, collection: str, record_id: int) -> bool:
        with self.get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM documents WHERE collection = ? AND id = ?",
                (collection, record_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def ping(self) -> bool:
        with self.get_connection() as conn:
            conn.execute("SELECT 1").fetchone()
        return True

    def count(self, collection: str) -> int:
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS count FROM documents WHERE collection = ?",
                (collection,),
            ).fetchone()
            return row["count"] if row else 0


class PostgreSQLDocumentStore(DocumentStoreBase):
    """PostgreSQL document store for production, documents kept as JSONB"""

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS documents (
            id SERIAL PRIMARY KEY,
            collection TEXT NOT NULL,
            data JSONB NOT NULL,
            created_at TIMESTAMPTZ DEFAULT now()
        );
        CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection);
    """

    def __init__(self, database_url: str):
        if not POSTGRES_AVAILABLE:
            raise ImportError(
                "psycopg2 not installed. Run: pip install psycopg2-binary"
            )
        self.database_url = database_url
        self.db_path = database_url  # For compatibility with existing code

    @contextmanager
    def get_connection(self):
        conn = psycopg2.connect(self.database_url)
        try:
            yield conn
        except psycopg2.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def create_schema(self) -> None:
        with self.get_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(self.SCHEMA)
            conn.commit()

    def add(self, collection: str, record: Dict[str, Any]) -> int:
        payload = json.loads(json.dumps(record, default=str))
        with self.get_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(
                    "INSERT INTO documents (collection, data) VALUES (%s, %s) RETURNING id",
                    (collection, psycopg2.extras.Json(payload)),
                )
                record_id = cursor.fetchone()[0]
            conn.commit()
            return record_id

    def get(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                cursor.execute(
                    "SELECT id, data FROM documents WHERE collection = %s AND id = %s",
                    (collection, record_id),
                )
                row = cursor.fetchone()
                return self.to_record(row["id"], row["data"]) if row else None

    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        conditions = ["collection = %s"]
        params: List[Any] = [collection]

        for field_name, value in (filters or {}).items():
            conditions.append("data -> %s = %s::jsonb")
            params.extend([_check_field(field_name), json.dumps(value)])

        direction = "DESC" if descending else "ASC"
        if order_by:
            order_clause = f"data ->> %s {direction}, id {direction}"
            params.append(_check_field(order_by))
        else:
            order_clause = "id ASC"

        query = f"""
            SELECT id, data FROM documents
            WHERE {" AND ".join(conditions)}
            ORDER BY {order_clause}
        """
        if limit is not None:
            query += " LIMIT %s"
            params.append(int(limit))

        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                cursor.execute(query, tuple(params))
                rows = cursor.fetchall()
                return [self.to_record(row["id"], row["data"]) for row in rows]

    def delete(self, collection: str, record_id: int) -> bool:
        with self.get_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(
                    "DELETE FROM documents WHERE collection = %s AND id = %s",
                    (collection, record_id),
                )
                deleted = cursor.rowcount > 0
            conn.commit()
            return deleted

    def ping(self) -> bool:
        with self.get_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute("SELECT 1")
        return True


# Type alias used in signatures across the codebase
DocumentStore = Union[SQLiteDocumentStore, PostgreSQLDocumentStore]


def get_store(db_path: Optional[Path] = None) -> DocumentStore:
    """
    Factory function to get the appropriate document store.

    Uses PostgreSQL if DATABASE_URL is set, otherwise falls back to SQLite.
    Set USE_SQLITE=1 to force SQLite even if DATABASE_URL is set.
    """
    use_sqlite = os.environ.get('USE_SQLITE', '').lower() in ('1', 'true', 'yes')
    database_url = os.environ.get('DATABASE_URL')

    if database_url and not use_sqlite:
        return PostgreSQLDocumentStore(database_url)
    else:
        return SQLiteDocumentStore(db_path)
