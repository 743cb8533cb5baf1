"""
Collections router for tracked collections and single-collection sync.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from dbsync.database.connections import get_database
from dbsync.schemas.collection import (
    CollectionCreate,
    CollectionResponse,
    LastSyncUpdateResponse,
)
from dbsync.schemas.sync import CollectionSyncResponse
from dbsync.services.collection_service import CollectionService

router = APIRouter(prefix="/collections", tags=["Collections"])


async def get_collection_service() -> CollectionService:
    """Dependency to get CollectionService instance."""
    db = await get_database()
    return CollectionService(db)


@router.get(
    "",
    response_model=list[CollectionResponse],
    summary="List collections",
)
async def list_collections(
    collection_service: CollectionService = Depends(get_collection_service),
):
    """List all tracked collections."""
    return await collection_service.list_collections()


@router.post(
    "",
    response_model=CollectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create collection",
)
async def create_collection(
    body: CollectionCreate,
    collection_service: CollectionService = Depends(get_collection_service),
):
    """
    Track a collection of an existing database.
    
    - **label**: Unique label (required)
    - **collection_name**: Collection name (required)
    - **database_id**: Owning database (required)
    """
    try:
        return await collection_service.create_collection(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get(
    "/database/{database_id}",
    response_model=list[CollectionResponse],
    summary="List collections of a database",
)
async def list_collections_by_database(
    database_id: str,
    collection_service: CollectionService = Depends(get_collection_service),
):
    """List collections belonging to a database."""
    return await collection_service.list_collections_by_database(database_id)


@router.get(
    "/{collection_id}",
    response_model=CollectionResponse,
    summary="Get collection",
)
async def get_collection(
    collection_id: str,
    collection_service: CollectionService = Depends(get_collection_service),
):
    """Get a collection by ID."""
    collection = await collection_service.get_collection(collection_id)
    
    if not collection:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Collection not found",
        )
    
    return collection


@router.post(
    "/{collection_id}/records/sync",
    response_model=CollectionSyncResponse,
    summary="Sync collection records",
)
async def sync_records(
    collection_id: str,
    collection_service: CollectionService = Depends(get_collection_service),
):
    """
    Copy documents, validation rules and indexes from the remote collection
    into the local one.
    
    Returns the document count taken when the copy started.
    """
    try:
        result = await collection_service.sync_records(collection_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Collection not found",
        )
    
    return result


@router.patch(
    "/{collection_id}/last-sync",
    response_model=LastSyncUpdateResponse,
    summary="Stamp last sync time",
)
async def update_last_sync(
    collection_id: str,
    collection_service: CollectionService = Depends(get_collection_service),
):
    """Set the collection's last sync time to now."""
    updated = await collection_service.update_last_sync(collection_id)
    
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Collection not found",
        )
    
    return LastSyncUpdateResponse(updated=updated)
