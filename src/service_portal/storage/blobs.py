"""
service_portal.storage.blobs

Key-addressed binary object storage for catalog images.

Responsibilities:
- Define the narrow `BlobStore` interface (put/get/delete/exists with content type).
- Provide an in-memory backend (tests, ephemeral deployments) and a filesystem
  backend (content type kept in a JSON sidecar next to the payload).
"""

from __future__ import annotations

import asyncio
import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from service_portal.errors import NotFound, ValidationError
from service_portal.settings import Settings

_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._\-]*$")


def check_key(key: str) -> str:
    # Keys are single path segments; anything else could escape the blob root.
    if not key or not _KEY_RE.match(key) or ".." in key:
        raise ValidationError(f"Invalid blob key {key!r}")
    return key


@dataclass(frozen=True, slots=True)
class BlobObject:
    key: str
    data: bytes
    content_type: str


class BlobStore(ABC):
    @abstractmethod
    async def put(self, key: str, data: bytes, *, content_type: str) -> None: ...

    @abstractmethod
    async def get(self, key: str) -> BlobObject: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def exists(self, key: str) -> bool: ...


class InMemoryBlobStore(BlobStore):
    def __init__(self) -> None:
        self._objects: dict[str, BlobObject] = {}
        self._lock = asyncio.Lock()

    async def put(self, key: str, data: bytes, *, content_type: str) -> None:
        check_key(key)
        async with self._lock:
            self._objects[key] = BlobObject(key=key, data=bytes(data), content_type=content_type)

    async def get(self, key: str) -> BlobObject:
        check_key(key)
        async with self._lock:
            try:
                return self._objects[key]
            except KeyError as e:
                raise NotFound(f"Image {key} not found") from e

    async def delete(self, key: str) -> None:
        check_key(key)
        async with self._lock:
            self._objects.pop(key, None)

    async def exists(self, key: str) -> bool:
        check_key(key)
        async with self._lock:
            return key in self._objects

    def keys(self) -> list[str]:
        return sorted(self._objects)


class FilesystemBlobStore(BlobStore):
    """
    Stores `<root>/<key>` plus `<root>/<key>.meta.json`. Disk I/O runs in a
    worker thread so the event loop never blocks on it.
    """

    _META_SUFFIX = ".meta.json"

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    def _paths(self, key: str) -> tuple[Path, Path]:
        check_key(key)
        return self._root / key, self._root / f"{key}{self._META_SUFFIX}"

    async def put(self, key: str, data: bytes, *, content_type: str) -> None:
        path, meta = self._paths(key)

        def _write() -> None:
            # Payload first: a sidecar never points at a missing file.
            tmp = path.with_name(f".{path.name}.tmp")
            tmp.write_bytes(data)
            tmp.replace(path)
            meta.write_text(json.dumps({"content_type": content_type}))

        await asyncio.to_thread(_write)

    async def get(self, key: str) -> BlobObject:
        path, meta = self._paths(key)

        def _read() -> BlobObject:
            try:
                data = path.read_bytes()
            except FileNotFoundError as e:
                raise NotFound(f"Image {key} not found") from e
            try:
                content_type = json.loads(meta.read_text()).get("content_type")
            except (FileNotFoundError, ValueError):
                content_type = None
            return BlobObject(key=key, data=data, content_type=content_type or "image/png")

        return await asyncio.to_thread(_read)

    async def delete(self, key: str) -> None:
        path, meta = self._paths(key)

        def _unlink() -> None:
            path.unlink(missing_ok=True)
            meta.unlink(missing_ok=True)

        await asyncio.to_thread(_unlink)

    async def exists(self, key: str) -> bool:
        path, _ = self._paths(key)
        return await asyncio.to_thread(path.is_file)


def build_blob_store(settings: Settings) -> BlobStore:
    if settings.blob_backend == "memory":
        return InMemoryBlobStore()
    return FilesystemBlobStore(settings.blob_root)


# --- Module Notes -----------------------------------------------------------
# An object-storage backend (S3/R2) only needs the four methods above; the image
# pipeline and the /images route never look past this interface.
