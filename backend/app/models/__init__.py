from app.models.document_audit import DocumentAudit

__all__ = [
    "DocumentAudit",
]
