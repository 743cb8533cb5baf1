"""
Connection model for the metadata database.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from dbsync.models.base import MongoRecord


class ConnectionRecord(MongoRecord):
    """
    Connection document model for the metadata connections collection.
    """
    label: str = Field(..., description="Unique connection label")
    description: Optional[str] = Field(None, description="Optional description")
    connection_uri: str = Field(..., description="MongoDB URI of the remote deployment")
    last_sync_at: Optional[datetime] = Field(None, description="Last sync through this connection")
    created_at: datetime = Field(..., description="Record creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
