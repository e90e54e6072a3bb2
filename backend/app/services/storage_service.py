"""
Filesystem storage for uploaded and finalized PDFs.

Layout under ``storage_root``::

    original/{document_id}.pdf        written once on upload
    signed/{document_id}-final.pdf    replaced on every finalize

Finalized output is written in two steps: ``stage_finalized`` writes a
uniquely named temp file into the staging area, ``commit_finalized``
atomically renames it into place. Until commit, readers of the finalized
slot keep seeing the previous artifact (or nothing).

The staging area sits beside ``storage_root`` (``{storage_root}-staging``
unless configured), so temp files are never served under ``/files`` and
stay on the same filesystem for the rename.
"""

import logging
import os
import re
import uuid
from pathlib import Path

from app.config import settings
from app.utils.exceptions import DocumentNotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

DOCUMENT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
STAGED_SUFFIX = ".tmp"


class DocumentStorage:
    def __init__(
        self,
        root: str = None,
        original_dir: str = None,
        signed_dir: str = None,
        staging_root: str = None,
    ):
        self.root = Path(root or settings.storage_root)
        self.original_dir = original_dir or settings.original_dir
        self.signed_dir = signed_dir or settings.signed_dir
        self.staging_root = Path(staging_root or settings.staging_root or f"{self.root}-staging")

    def _storage_path(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)

    def ensure_areas(self) -> None:
        areas = [self._storage_path(self.original_dir), self._storage_path(self.signed_dir), self.staging_root]
        for path in areas:
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError("mkdir", str(path), str(e)) from e
        self.sweep_staged()

    def sweep_staged(self) -> int:
        """Remove temp files left behind by a finalize that never committed."""
        removed = 0
        for staged in self.staging_root.glob(f"*{STAGED_SUFFIX}"):
            self.discard(staged)
            removed += 1
        if removed:
            logger.warning(f"Removed {removed} stale staged file(s) from {self.staging_root}")
        return removed

    @staticmethod
    def _check_id(document_id: str) -> str:
        # Ids end up in file names; refuse anything that could escape the area.
        if not document_id or not DOCUMENT_ID_RE.match(document_id):
            raise ValidationError("Invalid pdfId", field="pdfId", details={"provided": document_id})
        return document_id

    def original_relative_path(self, document_id: str) -> str:
        return f"{self.original_dir}/{self._check_id(document_id)}.pdf"

    def finalized_relative_path(self, document_id: str) -> str:
        return f"{self.signed_dir}/{self._check_id(document_id)}-final.pdf"

    def original_path(self, document_id: str) -> Path:
        return self.root / self.original_relative_path(document_id)

    def finalized_path(self, document_id: str) -> Path:
        return self.root / self.finalized_relative_path(document_id)

    def save_original(self, document_id: str, data: bytes) -> str:
        """Write uploaded bytes. Returns the path relative to the storage root."""
        path = self.original_path(document_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # 'xb' keeps originals write-once.
            with open(path, "xb") as f:
                f.write(data)
        except OSError as e:
            raise StorageError("write", str(path), str(e)) from e
        logger.info(f"Stored original {document_id} ({len(data)} bytes)")
        return self.original_relative_path(document_id)

    def read_original(self, document_id: str) -> bytes:
        path = self.original_path(document_id)
        if not path.is_file():
            raise DocumentNotFoundError(document_id)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError("read", str(path), str(e)) from e

    def stage_finalized(self, document_id: str, data: bytes) -> Path:
        target = self.finalized_path(document_id)
        staged = self.staging_root / f"{target.name}.{uuid.uuid4().hex}{STAGED_SUFFIX}"
        try:
            staged.parent.mkdir(parents=True, exist_ok=True)
            with open(staged, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            self.discard(staged)
            raise StorageError("write", str(staged), str(e)) from e
        return staged

    def commit_finalized(self, document_id: str, staged: Path) -> str:
        target = self.finalized_path(document_id)
        try:
            os.replace(staged, target)
        except OSError as e:
            raise StorageError("rename", str(target), str(e)) from e
        return self.finalized_relative_path(document_id)

    def discard(self, staged: Path) -> None:
        try:
            Path(staged).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove staged file {staged}: {e}")
