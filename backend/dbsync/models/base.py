"""
Shared base for metadata document models.
"""
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator


class MongoRecord(BaseModel):
    """Base for documents read from the metadata store."""
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    class Config:
        populate_by_name = True
