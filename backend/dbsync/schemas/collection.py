"""
Collection request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CollectionCreate(BaseModel):
    """Create collection request."""
    label: str = Field(..., min_length=1, max_length=200, description="Unique collection label")
    description: Optional[str] = Field(None, max_length=500, description="Collection description")
    collection_name: str = Field(..., min_length=1, description="Collection name")
    database_id: str = Field(..., description="Owning database ID")


class CollectionResponse(BaseModel):
    """Collection response."""
    id: str = Field(..., description="Collection ID")
    label: str = Field(..., description="Collection label")
    description: Optional[str] = Field(None, description="Collection description")
    collection_name: str = Field(..., description="Collection name")
    database_id: str = Field(..., description="Owning database ID")
    last_sync_at: Optional[datetime] = Field(None, description="Last successful sync")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")


class LastSyncUpdateResponse(BaseModel):
    """Result of stamping a collection's last sync time."""
    updated: bool = Field(..., description="Whether a record was updated")
