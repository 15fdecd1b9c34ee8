#!/usr/bin/env python3
"""
PostgreSQL database initialization script for Mitra
Creates the JSONB document table on a hosted PostgreSQL (e.g. Neon)
"""

import os
import sys
from pathlib import Path

# Project root, so the mitra package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from mitra.core.database import POSTGRES_AVAILABLE, PostgreSQLDocumentStore
from mitra.core.errors import StorageError


def init_database(database_url: str) -> bool:
    """Create the documents table at database_url if it does not exist"""
    if not POSTGRES_AVAILABLE:
        print("psycopg2 is missing; install the postgres extra: pip install 'mitra[postgres]'")
        return False

    print("Connecting to PostgreSQL...")
    try:
        store = PostgreSQLDocumentStore(database_url)
        store.create_schema()
        store.ping()
    except StorageError as e:
        print(f"✗ Database error: {e}")
        return False

    print("✓ Document table ready")
    return True


if __name__ == "__main__":
    url = os.environ.get("DATABASE_URL")
    if not url:
        print("DATABASE_URL is not set; point it at your PostgreSQL connection string")
        sys.exit(1)
    sys.exit(0 if init_database(url) else 1)
