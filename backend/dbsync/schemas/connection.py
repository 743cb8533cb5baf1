"""
Connection request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ConnectionCreate(BaseModel):
    """Create connection request."""
    label: str = Field(..., min_length=1, max_length=100, description="Unique connection label")
    description: Optional[str] = Field(None, max_length=500, description="Connection description")
    connection_uri: str = Field(..., min_length=1, description="MongoDB URI of the remote deployment")


class ConnectionResponse(BaseModel):
    """Connection response."""
    id: str = Field(..., description="Connection ID")
    label: str = Field(..., description="Connection label")
    description: Optional[str] = Field(None, description="Connection description")
    connection_uri: str = Field(..., description="MongoDB URI, credentials redacted")
    last_sync_at: Optional[datetime] = Field(None, description="Last sync through this connection")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
