"""
Replication engine - copies collections, validation rules and indexes from a
remote MongoDB database into the local one.
"""
from dbsync.replication.copier import DocumentCopier
from dbsync.replication.errors import (
    BatchExecutionError,
    IndexConflictError,
    ProvisioningItemError,
    StoreConnectionError,
    SyncError,
)
from dbsync.replication.indexes import IndexMirror
from dbsync.replication.orchestrator import CollectionSyncOrchestrator
from dbsync.replication.progress import LoggingObserver, NullObserver, SyncObserver, SyncProgress
from dbsync.replication.provisioning import DatabaseProvisioner, ProvisioningReport
from dbsync.replication.resolver import ResolvedStores, StoreHandleResolver
from dbsync.replication.schema import SchemaMirror
from dbsync.replication.targets import RawCoordinates, ResolvedHandles, SyncTarget

__all__ = [
    # Engine
    "StoreHandleResolver",
    "ResolvedStores",
    "DocumentCopier",
    "SchemaMirror",
    "IndexMirror",
    "CollectionSyncOrchestrator",
    "DatabaseProvisioner",
    "ProvisioningReport",
    # Targets
    "RawCoordinates",
    "ResolvedHandles",
    "SyncTarget",
    # Progress
    "SyncProgress",
    "SyncObserver",
    "NullObserver",
    "LoggingObserver",
    # Errors
    "SyncError",
    "StoreConnectionError",
    "BatchExecutionError",
    "IndexConflictError",
    "ProvisioningItemError",
]
