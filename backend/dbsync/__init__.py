"""
dbsync - pulls MongoDB collections from remote databases into a local store.
"""

__version__ = "0.1.0"
