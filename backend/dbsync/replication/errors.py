"""
Error taxonomy for the replication engine.

Every error raised on purpose by the engine derives from SyncError and carries
a short machine-readable ``kind`` that the HTTP layer returns to callers.
"""
from typing import Optional


class SyncError(Exception):
    """Base class for replication failures."""

    kind = "sync_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreConnectionError(SyncError, ConnectionError):
    """A source or destination store handle could not be opened."""

    kind = "connection_error"

    def __init__(self, role: str, uri: str, cause: Optional[BaseException] = None):
        message = f"Could not connect to {role} store at {uri}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.role = role
        self.uri = uri


class BatchExecutionError(SyncError):
    """One bulk upsert batch failed to apply to the destination."""

    kind = "batch_execution_error"

    def __init__(
        self,
        collection_name: str,
        batch_number: int,
        batch_size: int,
        documents_flushed: int,
        cause: Optional[BaseException] = None,
    ):
        message = (
            f"Batch {batch_number} ({batch_size} operations) failed for "
            f"collection '{collection_name}' after {documents_flushed} documents were flushed"
        )
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.collection_name = collection_name
        self.batch_number = batch_number
        self.batch_size = batch_size
        self.documents_flushed = documents_flushed


class IndexConflictError(SyncError):
    """Destination already has an index with the same name but another definition."""

    kind = "index_conflict"

    def __init__(self, collection_name: str, index_name: str, cause: Optional[BaseException] = None):
        message = f"Index '{index_name}' on collection '{collection_name}' conflicts with the destination"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.collection_name = collection_name
        self.index_name = index_name


class ProvisioningItemError(SyncError):
    """One collection failed during database-wide provisioning."""

    kind = "provisioning_item_error"

    STAGE_CREATE = "create"
    STAGE_RECORD = "record"

    def __init__(self, collection_name: str, stage: str, cause: Optional[BaseException] = None):
        message = f"Provisioning of collection '{collection_name}' failed at stage '{stage}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.collection_name = collection_name
        self.stage = stage
        self.cause = cause
