"""
Finalize: overlay fields onto a stored PDF and record a before/after audit.

Order of effects::

    read original -> hash -> render all fields -> serialize -> hash
        -> stage output -> append audit -> promote output

Nothing touches storage or the audit table until every field has rendered
and the output is serialized. After that the staged file and the audit row
are committed together. A failed audit insert discards the staged file and
a failed promotion revokes the audit row.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from app.config import settings
from app.schemas.document import FieldDescriptor
from app.services.audit_service import AuditService
from app.services.overlay_service import FieldOutcome, OverlayService
from app.services.storage_service import DocumentStorage
from app.utils.exceptions import PersistenceError, StorageError
from app.utils.hashing import sha256_hex

logger = logging.getLogger(__name__)


@dataclass
class FinalizeResult:
    document_id: str
    output_location: str
    url: str
    original_hash: str
    final_hash: str
    audit_id: str
    outcomes: List[FieldOutcome] = field(default_factory=list)


class FinalizationService:
    def __init__(self, storage: DocumentStorage, audit_service: AuditService,
                 overlay_service: OverlayService = None):
        self.storage = storage
        self.audit_service = audit_service
        self.overlay_service = overlay_service or OverlayService()

    def finalize(self, document_id: str, fields: Sequence[FieldDescriptor]) -> FinalizeResult:
        original_bytes = self.storage.read_original(document_id)
        original_hash = sha256_hex(original_bytes)
        logger.info(f"Finalizing {document_id}: {len(fields)} field(s), original {original_hash}")

        overlay = self.overlay_service.apply_fields(original_bytes, fields)
        final_hash = sha256_hex(overlay.pdf_bytes)

        staged = self.storage.stage_finalized(document_id, overlay.pdf_bytes)
        try:
            audit = self.audit_service.record_finalization(document_id, original_hash, final_hash)
        except PersistenceError:
            logger.warning(f"Audit insert failed for {document_id}; discarding staged output")
            self.storage.discard(staged)
            raise

        try:
            output_location = self.storage.commit_finalized(document_id, staged)
        except StorageError:
            logger.warning(f"Could not promote finalized file for {document_id}; revoking audit {audit.id}")
            self.storage.discard(staged)
            self.audit_service.revoke(audit)
            raise

        logger.info(
            f"Finalized {document_id}: {overlay.applied_count}/{len(fields)} field(s) applied, "
            f"final {final_hash}, audit {audit.id}"
        )
        return FinalizeResult(
            document_id=document_id,
            output_location=output_location,
            url=settings.public_url(output_location),
            original_hash=original_hash,
            final_hash=final_hash,
            audit_id=audit.id,
            outcomes=overlay.outcomes,
        )
