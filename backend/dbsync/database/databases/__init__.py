"""
Database definitions and collection constants.
"""
from dbsync.database.databases import sync_db

__all__ = ["sync_db"]
