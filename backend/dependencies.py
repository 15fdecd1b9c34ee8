"""
Shared resources for the API routes.

Config, the document store, the Coordinator and the intent classifier are
each built once per process and handed to routes through Depends(). Tests
replace them with app.dependency_overrides.
"""

from functools import lru_cache
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from mitra.core.config import Config
from mitra.core.database import DocumentStore, get_store as open_store
from mitra.agents import Coordinator, KeywordIntentClassifier


@lru_cache()
def get_config() -> Config:
    """Process-wide Config, read from $MITRA_CONFIG_DIR or ./config."""
    return Config()


@lru_cache()
def get_store() -> DocumentStore:
    """
    Open the document store.

    PostgreSQL when DATABASE_URL is set, otherwise the SQLite file
    named in settings.json.

    Raises:
        FileNotFoundError: if the SQLite file has not been created yet
    """
    return open_store(get_config().get_database_path())


@lru_cache()
def get_coordinator() -> Coordinator:
    """The app's Coordinator; one per process so the activity log persists."""
    return Coordinator(get_store(), get_config())


@lru_cache()
def get_classifier() -> KeywordIntentClassifier:
    """Default free-text intent classifier for /chat."""
    return KeywordIntentClassifier()
