"""
Storage Layer - Resource file storage

Provides file system storage operations:
- JSON and text resources, one file per identifier
- Verb-specific existence policy (fetch, create, upsert, remove)
- Per-identifier write serialization
"""

from .local import ResourceStore, is_valid_json
from .locks import KeyedLockArena
from .models import DEFAULT_SUBDIRECTORIES, ResourceKind, StoredResource

__all__ = [
    "ResourceStore",
    "is_valid_json",
    "KeyedLockArena",
    "DEFAULT_SUBDIRECTORIES",
    "ResourceKind",
    "StoredResource",
]
