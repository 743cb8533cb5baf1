"""
Health check router for liveness and readiness probes.
"""
from fastapi import APIRouter, status
from motor.motor_asyncio import AsyncIOMotorClient

from dbsync.config import get_settings
from dbsync.database.connections import get_mongo_client

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the API is running.
    """
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Readiness check that verifies the metadata store and the local store
    collections are synced into.
    """
    checks = {
        "api": "healthy",
        "mongodb": "unknown",
        "local_store": "unknown",
    }
    
    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        checks["mongodb"] = "healthy"
    except Exception as e:
        checks["mongodb"] = f"unhealthy: {str(e)}"
    
    settings = get_settings()
    local_client = None
    try:
        local_client = AsyncIOMotorClient(
            settings.local_db_uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        )
        await local_client.admin.command("ping")
        checks["local_store"] = "healthy"
    except Exception as e:
        checks["local_store"] = f"unhealthy: {str(e)}"
    finally:
        if local_client is not None:
            local_client.close()
    
    all_healthy = all(v == "healthy" for v in checks.values())
    
    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }
