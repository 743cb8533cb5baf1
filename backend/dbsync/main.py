"""
DB Sync Tool - FastAPI Application

Copies MongoDB collections, their validation rules and indexes from remote
deployments into a local MongoDB.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from dbsync import __version__
from dbsync.config import get_settings
from dbsync.core import request_context_middleware, request_id_ctx, setup_logging
from dbsync.database.connections import close_connections, get_mongo_client
from dbsync.database.databases.sync_db import create_metadata_indexes
from dbsync.replication import StoreConnectionError, SyncError
from dbsync.routers import collections, connections, databases, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    
    Startup:
    - Configure logging
    - Initialize the metadata store connection
    - Create metadata indexes
    
    Shutdown:
    - Close the metadata store connection
    """
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Starting up DB Sync Tool...")
    
    try:
        client = await get_mongo_client()
        await create_metadata_indexes(client[settings.metadata_db_name])
        logger.info("Metadata indexes created")
    except PyMongoError as e:
        logger.warning(f"Database initialization warning: {e}")
    
    yield
    
    logger.info("Shutting down DB Sync Tool...")
    await close_connections()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title="DB Sync Tool API",
    description="""
## MongoDB Collection Sync API

Registers remote MongoDB deployments and copies their collections into the
local MongoDB.

### Features
- **Connections**: Remote deployments, addressed by URI
- **Databases**: Remote databases and the local database they sync into
- **Collections**: Tracked collections with their last sync time
- **Sync**: One-shot copy of documents, validation rules and indexes, for one
  collection or a whole database

Every response carries an `X-Request-ID` header that also appears in the logs.
    """,
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(request_context_middleware)


@app.exception_handler(SyncError)
async def sync_error_handler(request: Request, exc: SyncError):
    """Turn replication failures into a JSON error body."""
    status_code = (
        status.HTTP_502_BAD_GATEWAY
        if isinstance(exc, StoreConnectionError)
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "error": exc.kind,
            "request_id": request_id_ctx.get(),
        },
    )


@app.exception_handler(PyMongoError)
async def pymongo_error_handler(request: Request, exc: PyMongoError):
    """Turn driver errors the engine lets through into the same JSON error body."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": str(exc),
            "error": "database_error",
            "request_id": request_id_ctx.get(),
        },
    )


# Include routers
app.include_router(health.router)
app.include_router(connections.router)
app.include_router(databases.router)
app.include_router(collections.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "DB Sync Tool API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
