from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.document_audit import DocumentAudit
from app.utils.exceptions import PersistenceError


class AuditService:
    """Append-only store of finalize audit records"""

    def __init__(self, db: Session):
        self.db = db

    def record_finalization(self,
                            document_id: str,
                            original_hash: str,
                            final_hash: str,
                            created_at: Optional[datetime] = None) -> DocumentAudit:
        """
        Append one audit record and commit it.

        Args:
            document_id: Id of the finalized document
            original_hash: Hex sha-256 of the stored original bytes
            final_hash: Hex sha-256 of the finalized output bytes
            created_at: Record time, defaults to now (UTC)

        Returns:
            The committed audit record

        Raises:
            PersistenceError: if the insert or commit fails
        """
        audit = DocumentAudit(
            document_id=document_id,
            original_hash=original_hash,
            final_hash=final_hash,
            created_at=created_at or datetime.utcnow()
        )

        try:
            self.db.add(audit)
            self.db.commit()
            self.db.refresh(audit)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("insert", str(e)) from e
        return audit

    def revoke(self, audit: DocumentAudit) -> None:
        """Remove a record whose finalized file never reached its slot."""
        try:
            self.db.delete(audit)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("delete", str(e)) from e

    def get_document_audits(self, document_id: str) -> List[DocumentAudit]:
        """Audit trail for a document, newest first"""
        return self.db.query(DocumentAudit).filter(
            DocumentAudit.document_id == document_id
        ).order_by(DocumentAudit.created_at.desc()).all()
