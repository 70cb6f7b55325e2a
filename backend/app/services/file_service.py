"""Bucketed asset storage on local disk (swappable to an object store)."""

from __future__ import annotations

import os
import secrets
import string
import time
from pathlib import Path
from urllib.parse import urlparse

from backend.app.core.config import settings

ITEM_BUCKET = "item"
PROMO_BUCKET = "promo"
REPORTS_BUCKET = "reports"

_BASE36 = string.digits + string.ascii_lowercase


def generate_file_name(prefix: str = "item", ext: str = "webp") -> str:
    """Unique name of the form ``<prefix>_<epoch-ms>_<6 base36 chars>.<ext>``."""
    timestamp = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{prefix}_{timestamp}_{suffix}.{ext}"


def name_from_url(url: str | None) -> str | None:
    """Return the stored file name for a public asset URL."""
    if not url:
        return None
    name = urlparse(url).path.rstrip("/").split("/")[-1]
    return name or None


class AssetStore:
    """Store and retrieve files grouped into named buckets."""

    def __init__(self, root: str | None = None, base_url: str | None = None) -> None:
        self._root = Path(root or settings.FILE_STORAGE_PATH)
        self._root.mkdir(parents=True, exist_ok=True)
        self._base_url = (base_url if base_url is not None else settings.ASSET_BASE_URL).rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def _bucket(self, bucket: str) -> Path:
        path = self._root / bucket
        path.mkdir(parents=True, exist_ok=True)
        return path

    def upload(self, bucket: str, name: str, data: bytes) -> str:
        """Persist *data* as *name* in *bucket* and return its public URL.

        Refuses to overwrite an existing object.
        """
        dest = self._bucket(bucket) / name
        if dest.exists():
            raise FileExistsError(f"{bucket}/{name} already exists")
        dest.write_bytes(data)
        return self.public_url(bucket, name)

    def save(self, relative_path: str, data: bytes) -> str:
        """Persist *data* under *relative_path* (overwriting) and return the full path."""
        dest = self._root / relative_path
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)
        return str(dest)

    def read(self, bucket: str, name: str) -> bytes:
        return (self._root / bucket / name).read_bytes()

    def exists(self, bucket: str, name: str) -> bool:
        return (self._root / bucket / name).exists()

    def list(self, bucket: str) -> list[str]:
        """File names in *bucket*, sorted."""
        return sorted(p.name for p in self._bucket(bucket).iterdir() if p.is_file())

    def remove(self, bucket: str, names: list[str]) -> None:
        """Delete *names* from *bucket*; missing files are ignored."""
        base = self._bucket(bucket)
        for name in names:
            path = base / name
            if path.exists():
                os.remove(path)

    def public_url(self, bucket: str, name: str) -> str:
        return f"{self._base_url}/{bucket}/{name}"
