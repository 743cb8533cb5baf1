"""
Request and response schemas for API endpoints.
"""
from dbsync.schemas.connection import ConnectionCreate, ConnectionResponse
from dbsync.schemas.database import DatabaseCreate, DatabaseResponse
from dbsync.schemas.collection import (
    CollectionCreate,
    CollectionResponse,
    LastSyncUpdateResponse,
)
from dbsync.schemas.sync import (
    CollectionSyncResponse,
    MissingCollectionsResponse,
    ProvisioningFailure,
    ProvisioningResponse,
    CollectionSyncFailure,
    DatabaseSyncResponse,
)

__all__ = [
    # Connection
    "ConnectionCreate",
    "ConnectionResponse",
    # Database
    "DatabaseCreate",
    "DatabaseResponse",
    # Collection
    "CollectionCreate",
    "CollectionResponse",
    "LastSyncUpdateResponse",
    # Sync
    "CollectionSyncResponse",
    "MissingCollectionsResponse",
    "ProvisioningFailure",
    "ProvisioningResponse",
    "CollectionSyncFailure",
    "DatabaseSyncResponse",
]
