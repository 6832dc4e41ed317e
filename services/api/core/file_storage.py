# services/api/core/file_storage.py
from __future__ import annotations

import logging
import secrets
import string
import time
from pathlib import Path
from typing import Optional
from urllib.parse import quote, unquote, urlparse

logger = logging.getLogger(__name__)

# URL prefix under which main.py mounts the files directory
FILES_ROUTE = "/files"

_ALPHABET = string.ascii_lowercase + string.digits


def _safe_segment(value: str, fallback: str = "misc") -> str:
    """
    Clean a folder segment so it cannot escape the storage root.
    """
    if not value:
        return fallback
    v = value.strip().replace("/", "_").replace("\\", "_")
    if not v or v in (".", ".."):
        return fallback
    return v[:120]


class LocalFileStorage:
    """
    Stores uploaded PDFs on local disk and hands out public URLs:

        <files_dir>/<product_type>/<millis>-<random>.pdf
        -> <public_base_url>/files/<product_type>/<millis>-<random>.pdf
    """

    def __init__(self, files_dir: str, public_base_url: str):
        self.root = Path(files_dir).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _new_object_name(self, folder: str, filename: str) -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "pdf"
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
        return f"{_safe_segment(folder)}/{int(time.time() * 1000)}-{suffix}.{ext}"

    def public_url(self, object_name: str) -> str:
        return f"{self.public_base_url}{FILES_ROUTE}/{quote(object_name)}"

    def save(self, folder: str, filename: str, data: bytes) -> str:
        """
        Write `data` under `folder` and return its public URL.
        Never overwrites an existing object.
        """
        object_name = self._new_object_name(folder, filename)
        path = self.root / object_name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "xb") as f:
            f.write(data)
        logger.info(f"Stored {len(data)} bytes at {object_name}")
        return self.public_url(object_name)

    def path_for_url(self, url: str) -> Optional[Path]:
        """
        Map a public URL back to the stored file, or None if the URL
        does not point into this storage.
        """
        prefix = urlparse(self.public_base_url).path.rstrip("/") + FILES_ROUTE + "/"
        parsed = urlparse(url)
        if not parsed.path.startswith(prefix):
            return None
        object_name = unquote(parsed.path[len(prefix):])
        if not object_name:
            return None
        path = (self.root / object_name).resolve()
        if self.root not in path.parents:
            return None
        return path

    def remove(self, url: str) -> bool:
        """
        Delete the object behind `url`.

        Returns:
            True if a file was removed, False if the URL is not ours or the
            file is already gone.
        """
        path = self.path_for_url(url)
        if path is None or not path.exists():
            return False
        path.unlink()
        logger.info(f"Removed stored file {path.relative_to(self.root)}")
        return True
