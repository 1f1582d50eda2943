import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from app.core.errors import Gone, PayloadTooLarge

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredBlob:
    stored_name: str
    size_bytes: int


def generate_name(original_name: str) -> str:
    """Build ``<epoch-ms>-<random><ext>``; only the extension survives from the client name."""
    ext = Path(original_name or "").suffix.lower()
    return f"{int(time.time() * 1000)}-{secrets.token_hex(8)}{ext}"


class BlobStore:
    """Flat directory of uploaded payloads keyed by generated names."""

    def __init__(self, root: str | Path, max_bytes: int | None = None) -> None:
        self.root = Path(root)
        self.max_bytes = max_bytes

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def path_for(self, stored_name: str) -> Path | None:
        if not stored_name or Path(stored_name).name != stored_name or stored_name in {".", ".."}:
            return None
        return self.root / stored_name

    def _open_new(self, original_name: str):
        root = self.ensure_root()
        while True:
            stored_name = generate_name(original_name)
            try:
                return stored_name, (root / stored_name).open("xb")
            except FileExistsError:
                continue

    def _check_size(self, total: int) -> None:
        if self.max_bytes is not None and total > self.max_bytes:
            raise PayloadTooLarge("File exceeds max size")

    def store(self, data: bytes, original_name: str) -> StoredBlob:
        self._check_size(len(data))
        stored_name, handle = self._open_new(original_name)
        with handle:
            handle.write(data)
        return StoredBlob(stored_name=stored_name, size_bytes=len(data))

    async def save_upload(self, file: UploadFile) -> StoredBlob:
        stored_name, handle = self._open_new(file.filename or "")
        total = 0
        try:
            with handle:
                while True:
                    chunk = await file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    total += len(chunk)
                    self._check_size(total)
                    handle.write(chunk)
        except Exception:
            self.delete(stored_name)
            raise
        finally:
            await file.close()
        return StoredBlob(stored_name=stored_name, size_bytes=total)

    def locate(self, stored_name: str) -> Path:
        path = self.path_for(stored_name)
        if path is None or not path.is_file():
            raise Gone("file missing")
        return path

    def retrieve(self, stored_name: str) -> bytes:
        return self.locate(stored_name).read_bytes()

    def delete(self, stored_name: str) -> bool:
        path = self.path_for(stored_name)
        if path is None:
            return False
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("blob_delete_failed", extra={"stored_name": stored_name, "error": str(exc)})
            return False
        return True
