"""
Local Resource Storage - File system storage for named documents

Each resource is one file:

    <data_dir>/
    ├── configs/       # JSON resources:  <id>.json
    └── texts/         # TEXT resources:  <id>.txt

The file on disk is the only source of truth: existence is checked on every
operation and nothing is cached, so out-of-band changes show up as
not-found or internal errors at operation time.

Existence policy per operation:
- fetch:  file must exist
- create: file must not exist (exclusive create)
- upsert: no precondition (atomic replace)
- remove: file must exist

JSON bodies are validated for syntax before any write and stored verbatim.
Stored JSON is validated again on fetch; a failure there means the file was
corrupted after it was written and is reported as an internal error.

Operations on the same (kind, id) are serialized in-process; different ids
proceed concurrently.
"""

import json
import uuid
from contextlib import suppress
from pathlib import Path
from typing import Dict, Optional, Union

import aiofiles
import aiofiles.os

from config_server.exceptions import (
    InvalidContentError,
    ResourceExistsError,
    ResourceNotFoundError,
    StorageInternalError,
    StoreError,
)
from config_server.monitoring import get_logger
from config_server.security.sanitization import validate_identifier

from .locks import KeyedLockArena
from .models import DEFAULT_SUBDIRECTORIES, ResourceKind, StoredResource

logger = get_logger(__name__)


def _reject_constant(name: str) -> None:
    raise ValueError(f"Invalid JSON constant: {name}")


def is_valid_json(content: Union[bytes, str]) -> bool:
    """
    Check that content is syntactically valid JSON.

    NaN and Infinity literals are rejected; they are not part of JSON.
    """
    try:
        json.loads(content, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False
    return True


class ResourceStore:
    """
    File-backed store for JSON and text resources.

    Args:
        data_dir: Base directory; kind subdirectories live beneath it
        subdirectories: Optional override of the per-kind subdirectory names
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        subdirectories: Optional[Dict[ResourceKind, str]] = None
    ):
        self.data_dir = Path(data_dir)
        self.subdirectories = dict(DEFAULT_SUBDIRECTORIES)
        if subdirectories:
            self.subdirectories.update(subdirectories)
        self._locks = KeyedLockArena()

    @property
    def locks(self) -> KeyedLockArena:
        return self._locks

    def base_dir(self, kind: ResourceKind) -> Path:
        """Directory holding all resources of a kind."""
        return self.data_dir / self.subdirectories[ResourceKind(kind)]

    def resource_path(self, kind: ResourceKind, resource_id: str) -> Path:
        """
        Location of a resource.

        Raises:
            MissingIdentifierError: If resource_id is blank
            InvalidIdentifierError: If resource_id fails the grammar
        """
        kind = ResourceKind(kind)
        try:
            validate_identifier(resource_id, kind=kind.value)
        except StoreError as e:
            logger.warning(e.message)
            raise
        return self.base_dir(kind) / f"{resource_id}.{kind.extension}"

    def _check_content(self, kind: ResourceKind, resource_id: str, body: bytes) -> None:
        if kind is ResourceKind.JSON and not is_valid_json(body):
            logger.warning(f"Invalid JSON in request body for {resource_id}")
            raise InvalidContentError(
                "Invalid JSON format",
                kind=kind.value,
                resource_id=resource_id
            )

    def _not_found(self, kind: ResourceKind, resource_id: str) -> ResourceNotFoundError:
        logger.warning(f"{kind.value} resource not found for identifier {resource_id}")
        return ResourceNotFoundError(
            f"Resource not found for identifier {resource_id}",
            kind=kind.value,
            resource_id=resource_id
        )

    def _internal_error(
        self,
        action: str,
        kind: ResourceKind,
        resource_id: str,
        error: BaseException
    ) -> StorageInternalError:
        logger.error(f"Failed to {action} {kind.value} resource {resource_id}", exc_info=error)
        return StorageInternalError(
            f"Failed to {action} resource {resource_id}",
            kind=kind.value,
            resource_id=resource_id
        )

    # =========================================================================
    # RESOURCE OPERATIONS
    # =========================================================================

    async def fetch(self, kind: ResourceKind, resource_id: str) -> StoredResource:
        """
        Read a resource.

        Returns:
            StoredResource with the stored bytes, verbatim

        Raises:
            ResourceNotFoundError: If no file exists
            StorageInternalError: On I/O failure, or stored JSON that no longer parses
        """
        kind = ResourceKind(kind)
        path = self.resource_path(kind, resource_id)

        async with self._locks.hold((kind, resource_id)):
            try:
                async with aiofiles.open(path, "rb") as f:
                    content = await f.read()
            except FileNotFoundError:
                raise self._not_found(kind, resource_id) from None
            except OSError as e:
                # Includes a directory at the path and over-long names
                raise self._internal_error("read", kind, resource_id, e) from e

        if kind is ResourceKind.JSON and not is_valid_json(content):
            logger.error(f"Invalid JSON in stored {kind.value} resource {resource_id} ({path})")
            raise StorageInternalError(
                f"Stored resource {resource_id} is corrupt",
                kind=kind.value,
                resource_id=resource_id
            )

        logger.info(f"Served {kind.value} resource {resource_id} ({len(content)} bytes)")
        return StoredResource(kind=kind, resource_id=resource_id, content=content)

    async def create(self, kind: ResourceKind, resource_id: str, body: bytes) -> StoredResource:
        """
        Create a new resource; never overwrites.

        Raises:
            ResourceExistsError: If the resource already exists
            InvalidContentError: If a JSON body does not parse
            StorageInternalError: On I/O failure
        """
        kind = ResourceKind(kind)
        path = self.resource_path(kind, resource_id)

        async with self._locks.hold((kind, resource_id)):
            try:
                exists = await aiofiles.os.path.exists(path)
            except OSError as e:
                raise self._internal_error("create", kind, resource_id, e) from e
            if exists:
                raise self._conflict(kind, resource_id)

            self._check_content(kind, resource_id, body)

            try:
                await aiofiles.os.makedirs(path.parent, exist_ok=True)
            except OSError as e:
                raise self._internal_error("create", kind, resource_id, e) from e

            opened = False
            try:
                async with aiofiles.open(path, "xb") as f:
                    opened = True
                    await f.write(body)
                    await f.flush()
            except FileExistsError:
                # Created by another process after the existence check
                raise self._conflict(kind, resource_id) from None
            except OSError as e:
                if opened:
                    with suppress(OSError):
                        await aiofiles.os.remove(path)
                raise self._internal_error("create", kind, resource_id, e) from e

        logger.info(f"Created {kind.value} resource {resource_id} ({len(body)} bytes)")
        return StoredResource(kind=kind, resource_id=resource_id, content=body, created=True)

    def _conflict(self, kind: ResourceKind, resource_id: str) -> ResourceExistsError:
        logger.warning(f"{kind.value} resource {resource_id} already exists")
        return ResourceExistsError(
            f"Resource {resource_id} already exists",
            kind=kind.value,
            resource_id=resource_id
        )

    async def upsert(self, kind: ResourceKind, resource_id: str, body: bytes) -> StoredResource:
        """
        Create or replace a resource.

        The body is written to a temporary sibling and moved into place, so
        readers never observe a partially written file. A body that fails
        validation leaves any existing content untouched.

        Returns:
            StoredResource with `created` set when no file existed before

        Raises:
            InvalidContentError: If a JSON body does not parse
            StorageInternalError: On I/O failure
        """
        kind = ResourceKind(kind)
        path = self.resource_path(kind, resource_id)
        self._check_content(kind, resource_id, body)

        # Leading dot: can never collide with a valid identifier. Fixed length,
        # so any id whose own file name fits also has a temp name that fits.
        temp_path = path.with_name(f".{uuid.uuid4().hex}.tmp")

        async with self._locks.hold((kind, resource_id)):
            try:
                existed = await aiofiles.os.path.exists(path)
                await aiofiles.os.makedirs(path.parent, exist_ok=True)
                try:
                    async with aiofiles.open(temp_path, "wb") as f:
                        await f.write(body)
                        await f.flush()
                    await aiofiles.os.replace(temp_path, path)
                except OSError:
                    with suppress(OSError):
                        await aiofiles.os.remove(temp_path)
                    raise
            except OSError as e:
                raise self._internal_error("save", kind, resource_id, e) from e

        action = "Replaced" if existed else "Created"
        logger.info(f"{action} {kind.value} resource {resource_id} ({len(body)} bytes)")
        return StoredResource(
            kind=kind,
            resource_id=resource_id,
            content=body,
            created=not existed
        )

    async def remove(self, kind: ResourceKind, resource_id: str) -> None:
        """
        Delete a resource.

        Raises:
            ResourceNotFoundError: If no file exists
            StorageInternalError: On I/O failure
        """
        kind = ResourceKind(kind)
        path = self.resource_path(kind, resource_id)

        async with self._locks.hold((kind, resource_id)):
            try:
                await aiofiles.os.remove(path)
            except FileNotFoundError:
                raise self._not_found(kind, resource_id) from None
            except OSError as e:
                raise self._internal_error("delete", kind, resource_id, e) from e

        logger.info(f"Deleted {kind.value} resource {resource_id}")
