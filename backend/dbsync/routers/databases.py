"""
Databases router for tracked databases, collection provisioning and
database-wide sync.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from dbsync.database.connections import get_database
from dbsync.schemas.database import DatabaseCreate, DatabaseResponse
from dbsync.schemas.sync import (
    DatabaseSyncResponse,
    MissingCollectionsResponse,
    ProvisioningResponse,
)
from dbsync.services.database_service import DatabaseService

router = APIRouter(prefix="/databases", tags=["Databases"])


async def get_database_service() -> DatabaseService:
    """Dependency to get DatabaseService instance."""
    db = await get_database()
    return DatabaseService(db)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Database not found",
    )


@router.get(
    "",
    response_model=list[DatabaseResponse],
    summary="List databases",
)
async def list_databases(
    database_service: DatabaseService = Depends(get_database_service),
):
    """List all tracked databases."""
    return await database_service.list_databases()


@router.post(
    "",
    response_model=DatabaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create database",
)
async def create_database(
    body: DatabaseCreate,
    database_service: DatabaseService = Depends(get_database_service),
):
    """
    Track a remote database.
    
    - **label**: Database label (required)
    - **db_name**: Remote database name (required)
    - **target_db_name**: Local database name (defaults to db_name)
    - **connection_id**: Owning connection (required)
    """
    try:
        return await database_service.create_database(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get(
    "/connection/{connection_id}",
    response_model=list[DatabaseResponse],
    summary="List databases of a connection",
)
async def list_databases_by_connection(
    connection_id: str,
    database_service: DatabaseService = Depends(get_database_service),
):
    """List databases reached through a connection."""
    return await database_service.list_databases_by_connection(connection_id)


@router.get(
    "/{database_id}",
    response_model=DatabaseResponse,
    summary="Get database",
)
async def get_database_by_id(
    database_id: str,
    database_service: DatabaseService = Depends(get_database_service),
):
    """Get a database by ID."""
    database = await database_service.get_database(database_id)
    if not database:
        raise _not_found()
    return database


@router.get(
    "/{database_id}/collections/missing",
    response_model=MissingCollectionsResponse,
    summary="List collections missing locally",
)
async def get_missing_collections(
    database_id: str,
    database_service: DatabaseService = Depends(get_database_service),
):
    """Compare remote and local collection names without changing anything."""
    try:
        missing = await database_service.get_collections_to_create(database_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    
    if missing is None:
        raise _not_found()
    return MissingCollectionsResponse(database_id=database_id, missing=missing)


@router.post(
    "/{database_id}/collections/provision",
    response_model=ProvisioningResponse,
    summary="Create missing collections",
)
async def provision_collections(
    database_id: str,
    database_service: DatabaseService = Depends(get_database_service),
):
    """
    Create every remote collection that is missing locally and track it.
    
    Collections that fail are listed in `failed`; the others still succeed.
    """
    try:
        report = await database_service.provision_collections(database_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    
    if report is None:
        raise _not_found()
    return report


@router.post(
    "/{database_id}/sync",
    response_model=DatabaseSyncResponse,
    summary="Sync a whole database",
)
async def sync_database(
    database_id: str,
    database_service: DatabaseService = Depends(get_database_service),
):
    """Provision missing collections, then sync every tracked collection."""
    try:
        result = await database_service.sync_database(database_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    
    if result is None:
        raise _not_found()
    return result
