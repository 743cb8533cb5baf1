"""
Sync and provisioning response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from dbsync.replication.provisioning import ProvisioningReport


class CollectionSyncResponse(BaseModel):
    """Result of syncing one collection."""
    success: bool = Field(True, description="Whether the sync completed")
    collection_id: str = Field(..., description="Collection record ID")
    collection_name: str = Field(..., description="Synced collection name")
    records: int = Field(..., description="Document count snapshotted at the start of the copy")
    synced_at: datetime = Field(..., description="When the sync finished")


class MissingCollectionsResponse(BaseModel):
    """Collections present remotely but not locally."""
    database_id: str
    missing: list[str] = Field(default=[], description="Collection names to create")


class ProvisioningFailure(BaseModel):
    """One collection that could not be provisioned."""
    collection_name: str
    stage: str = Field(..., description="Step that failed: create or record")
    message: str


class ProvisioningResponse(BaseModel):
    """Aggregate result of provisioning missing collections."""
    database_id: str
    created: list[str] = Field(default=[], description="Collections created and recorded")
    skipped: list[str] = Field(default=[], description="Collections already present locally")
    failed: list[ProvisioningFailure] = Field(default=[], description="Collections that failed")

    @classmethod
    def from_report(cls, database_id: str, report: ProvisioningReport) -> "ProvisioningResponse":
        """Convert a provisioning report to a response schema."""
        return cls(
            database_id=database_id,
            created=sorted(report.created),
            skipped=sorted(report.skipped),
            failed=[
                ProvisioningFailure(
                    collection_name=name,
                    stage=error.stage,
                    message=str(error),
                )
                for name, error in sorted(report.failed.items())
            ],
        )


class CollectionSyncFailure(BaseModel):
    """One collection whose sync failed during a database-wide sync."""
    collection_name: str
    error: str = Field(..., description="Error kind")
    message: str


class DatabaseSyncResponse(BaseModel):
    """Result of provisioning and syncing a whole database."""
    database_id: str
    provisioning: ProvisioningResponse
    synced: dict[str, int] = Field(default={}, description="Record counts per synced collection")
    failed: list[CollectionSyncFailure] = Field(default=[], description="Collections that failed to sync")
    synced_at: datetime
