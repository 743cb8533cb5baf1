"""
Database request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DatabaseCreate(BaseModel):
    """Create database request."""
    label: str = Field(..., min_length=1, max_length=100, description="Database label")
    description: Optional[str] = Field(None, max_length=500, description="Database description")
    db_name: str = Field(..., min_length=1, description="Remote database name")
    target_db_name: Optional[str] = Field(
        None,
        min_length=1,
        description="Local database name (defaults to db_name)"
    )
    connection_id: str = Field(..., description="Owning connection ID")


class DatabaseResponse(BaseModel):
    """Database response."""
    id: str = Field(..., description="Database ID")
    label: str = Field(..., description="Database label")
    description: Optional[str] = Field(None, description="Database description")
    db_name: str = Field(..., description="Remote database name")
    target_db_name: Optional[str] = Field(None, description="Local database name")
    connection_id: str = Field(..., description="Owning connection ID")
    last_sync_at: Optional[datetime] = Field(None, description="Last database-wide sync")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
