#!/usr/bin/env python3
"""
Database initialization script for Mitra
Creates the SQLite document store used by every agent
"""

import sys
from pathlib import Path

# Project root, so the mitra package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from mitra.core.config import Config
from mitra.core.database import SQLiteDocumentStore
from mitra.core.errors import StorageError

COLLECTIONS = ["gym_logs", "todos", "finance", "journal", "medications", "lifestyle"]


def init_database(db_path: Path, force: bool = False) -> bool:
    """Create the document store at db_path"""

    if db_path.exists():
        if not force:
            response = input(f"Database already exists at {db_path}. Overwrite? (yes/no): ")
            if response.lower() != 'yes':
                print("Aborting database initialization.")
                return False
        db_path.unlink()

    print(f"Creating database at {db_path}...")
    try:
        store = SQLiteDocumentStore.initialize(db_path)
        store.ping()
    except StorageError as e:
        print(f"✗ Database error: {e}")
        return False

    print("✓ Document store created successfully!")
    print(f"✓ Database location: {db_path}")
    print(f"✓ Collections: {', '.join(COLLECTIONS)}")
    return True


if __name__ == "__main__":
    force = "--force" in sys.argv[1:]
    db_path = Config().get_database_path()
    print(f"Mitra store bootstrap ({'forced' if force else 'interactive'})")
    sys.exit(0 if init_database(db_path, force=force) else 1)
