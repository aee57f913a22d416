"""
service_portal.storage.images

Image ingestion pipeline for catalog entries.

Responsibilities:
- Read intrinsic dimensions and derive the display size at a fixed height.
- Re-encode to PNG at the display height (or pass the original bytes through
  when resizing is disabled) and store the result under a fresh blob key.
- Stage a new image around the caller's record write: the new blob is released
  if the write fails (orphan cleanup), the superseded blob once it succeeds
  (replacement).
- Release blobs best-effort: a failed delete is logged, never raised.
"""

from __future__ import annotations

import asyncio
import io
import math
import re
import secrets
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from service_portal.errors import PortalError, ProcessingError, Unavailable
from service_portal.observability.logging import get_logger
from service_portal.storage.blobs import BlobStore

log = get_logger(__name__)

PNG_CONTENT_TYPE = "image/png"

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._\-]")
_DOTS_RE = re.compile(r"\.{2,}")


@dataclass(frozen=True, slots=True)
class StoredImage:
    blob_ref: str
    original_width: int
    original_height: int
    display_height: int
    display_width: int


@dataclass(slots=True)
class StagedImage:
    stored: StoredImage
    previous_ref: str | None = None


def display_width_for(width: int, height: int, display_height: int) -> int:
    if width <= 0 or height <= 0:
        raise ProcessingError(f"Degenerate image dimensions {width}x{height}")
    # Halves round up.
    return max(1, math.floor(width / height * display_height + 0.5))


def blob_key_for(base_name: str) -> str:
    """
    `<ms timestamp>-<hex>-<name>.png`, with whitespace runs collapsed to `_`
    and any other unsafe character replaced.
    """

    name = _UNSAFE_RE.sub("_", _WHITESPACE_RE.sub("_", base_name.strip()))
    name = _DOTS_RE.sub(".", name).strip(".") or "image"
    return f"{time.time_ns() // 1_000_000}-{secrets.token_hex(3)}-{name[:120]}.png"


def _render(raw: bytes, display_height: int, resize: bool) -> tuple[bytes, str, int, int, int]:
    try:
        with Image.open(io.BytesIO(raw)) as img:
            width, height = img.size
            display_width = display_width_for(width, height, display_height)
            if not resize:
                content_type = Image.MIME.get(img.format or "", "application/octet-stream")
                return raw, content_type, width, height, display_width

            img.load()
            if img.mode not in ("RGB", "RGBA", "L", "LA"):
                img = img.convert("RGBA")
            resized = img.resize((display_width, display_height), Image.Resampling.LANCZOS)
            out = io.BytesIO()
            resized.save(out, format="PNG")
            return out.getvalue(), PNG_CONTENT_TYPE, width, height, display_width
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ProcessingError(f"Unreadable image: {e}") from e


class ImagePipeline:
    def __init__(
        self,
        *,
        blobs: BlobStore,
        display_height: int = 50,
        resize_enabled: bool = True,
        blob_timeout_seconds: float = 10.0,
    ) -> None:
        self._blobs = blobs
        self._display_height = display_height
        self._resize = resize_enabled
        self._timeout = blob_timeout_seconds
        if not resize_enabled:
            log.warning(
                "image_resize_disabled",
                detail="original bytes are stored unmodified; display size is metadata only",
            )

    async def ingest(self, raw: bytes, base_name: str) -> StoredImage:
        if not raw:
            raise ProcessingError("Empty image upload")

        # Pillow decoding is CPU-bound; keep it off the event loop.
        data, content_type, width, height, display_width = await asyncio.to_thread(
            _render, raw, self._display_height, self._resize
        )
        key = blob_key_for(base_name)
        try:
            async with asyncio.timeout(self._timeout):
                await self._blobs.put(key, data, content_type=content_type)
        except TimeoutError as e:
            raise Unavailable("Blob store did not respond in time") from e

        log.info(
            "image_stored",
            blob_ref=key,
            original=f"{width}x{height}",
            display=f"{display_width}x{self._display_height}",
            resized=self._resize,
        )
        return StoredImage(
            blob_ref=key,
            original_width=width,
            original_height=height,
            display_height=self._display_height,
            display_width=display_width,
        )

    @asynccontextmanager
    async def stage(self, raw: bytes, base_name: str) -> AsyncIterator[StagedImage]:
        """
        Ingest `raw`, then let the caller write the record that points at it.

        If the body raises, the new blob is released and the error propagates.
        If it completes, `staged.previous_ref` (set by the caller to the blob
        the record pointed at before) is released. Either release is best-effort.
        """

        staged = StagedImage(stored=await self.ingest(raw, base_name))
        try:
            yield staged
        except Exception:
            await self.release(staged.stored.blob_ref)
            raise
        if staged.previous_ref != staged.stored.blob_ref:
            await self.release(staged.previous_ref)

    async def release(self, blob_ref: str | None) -> bool:
        """
        Best-effort delete. Returns False (and logs) instead of raising.
        """

        if not blob_ref:
            return True
        try:
            async with asyncio.timeout(self._timeout):
                await self._blobs.delete(blob_ref)
        except (TimeoutError, PortalError, OSError) as e:
            log.warning("image_release_failed", blob_ref=blob_ref, error=str(e) or type(e).__name__)
            return False
        return True
