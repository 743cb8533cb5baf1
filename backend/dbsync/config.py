"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""
    
    # Metadata store (connections, databases, collections records)
    mongo_uri: str = "mongodb://localhost:27017"
    metadata_db_name: str = "db_sync_tool"
    
    # Local store that receives synced collections
    local_db_uri: str = "mongodb://localhost:27017"
    
    # Replication
    sync_batch_size: int = 1000
    provisioning_concurrency: int = 8
    server_selection_timeout_ms: int = 10000
    progress_log_every: int = 1000
    
    # Logging
    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
