"""
Storage Models

Content kinds and the value returned by store operations.
"""

from dataclasses import dataclass
from enum import Enum


class ResourceKind(str, Enum):
    """Content kind; selects storage subtree, extension and validation."""

    JSON = "json"
    TEXT = "text"

    @property
    def extension(self) -> str:
        return "json" if self is ResourceKind.JSON else "txt"

    @property
    def media_type(self) -> str:
        if self is ResourceKind.JSON:
            return "application/json"
        return "text/plain; charset=utf-8"


DEFAULT_SUBDIRECTORIES = {
    ResourceKind.JSON: "configs",
    ResourceKind.TEXT: "texts",
}


@dataclass(frozen=True)
class StoredResource:
    """Result of a successful fetch, create or upsert."""

    kind: ResourceKind
    resource_id: str
    content: bytes
    created: bool = False

    @property
    def media_type(self) -> str:
        return self.kind.media_type
