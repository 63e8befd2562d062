from functools import lru_cache

from app.core.config import settings

from .base import DataStore, StoreError
from .sqlite_store import SqliteDataStore


@lru_cache(maxsize=1)
def get_data_store() -> DataStore:
    return SqliteDataStore(settings.store_db_path)


__all__ = ["DataStore", "StoreError", "SqliteDataStore", "get_data_store"]
