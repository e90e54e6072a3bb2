from fastapi import APIRouter, Depends

from app.api.dependencies import get_audit_service
from app.schemas.document import DocumentAuditResponse
from app.services.audit_service import AuditService

router = APIRouter(prefix="/audits", tags=["audit"])


@router.get("/{document_id}", response_model=list[DocumentAuditResponse])
def get_document_audit(document_id: str, service: AuditService = Depends(get_audit_service)):
    """Get the finalize audit trail for a document"""
    return service.get_document_audits(document_id)
