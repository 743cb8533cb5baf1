"""
Connections router for remote MongoDB deployments.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from dbsync.database.connections import get_database
from dbsync.schemas.connection import ConnectionCreate, ConnectionResponse
from dbsync.services.connection_service import ConnectionService

router = APIRouter(prefix="/connections", tags=["Connections"])


async def get_connection_service() -> ConnectionService:
    """Dependency to get ConnectionService instance."""
    db = await get_database()
    return ConnectionService(db)


@router.get(
    "",
    response_model=list[ConnectionResponse],
    summary="List connections",
)
async def list_connections(
    connection_service: ConnectionService = Depends(get_connection_service),
):
    """List all connections. URIs are returned with credentials redacted."""
    return await connection_service.list_connections()


@router.post(
    "",
    response_model=ConnectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create connection",
)
async def create_connection(
    body: ConnectionCreate,
    connection_service: ConnectionService = Depends(get_connection_service),
):
    """
    Register a remote MongoDB deployment.
    
    - **label**: Unique label (required)
    - **description**: Optional description
    - **connection_uri**: MongoDB URI (required)
    """
    try:
        return await connection_service.create_connection(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get(
    "/{connection_id}",
    response_model=ConnectionResponse,
    summary="Get connection",
)
async def get_connection(
    connection_id: str,
    connection_service: ConnectionService = Depends(get_connection_service),
):
    """Get a connection by ID."""
    connection = await connection_service.get_connection(connection_id)
    
    if not connection:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Connection not found",
        )
    
    return connection


@router.delete(
    "/{connection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete connection",
)
async def delete_connection(
    connection_id: str,
    connection_service: ConnectionService = Depends(get_connection_service),
):
    """Delete a connection that no database references anymore."""
    try:
        deleted = await connection_service.delete_connection(connection_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Connection not found",
        )
