"""
API routers.
"""
from dbsync.routers import collections, connections, databases, health

__all__ = ["collections", "connections", "databases", "health"]
