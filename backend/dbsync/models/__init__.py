"""
Pydantic models for metadata documents.
"""
from dbsync.models.base import MongoRecord
from dbsync.models.connection import ConnectionRecord
from dbsync.models.database import DatabaseRecord
from dbsync.models.collection import CollectionRecord

__all__ = [
    "MongoRecord",
    "ConnectionRecord",
    "DatabaseRecord",
    "CollectionRecord",
]
