from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.audit_service import AuditService
from app.services.document_service import DocumentService
from app.services.finalization_service import FinalizationService
from app.services.storage_service import DocumentStorage


def get_database() -> Iterator[Session]:
    """Dependency for database session"""
    with get_db() as db:
        yield db


def get_storage() -> DocumentStorage:
    return DocumentStorage()


def get_document_service(storage: DocumentStorage = Depends(get_storage)) -> DocumentService:
    return DocumentService(storage)


def get_audit_service(db: Session = Depends(get_database)) -> AuditService:
    return AuditService(db)


def get_finalization_service(
    storage: DocumentStorage = Depends(get_storage),
    audit_service: AuditService = Depends(get_audit_service),
) -> FinalizationService:
    return FinalizationService(storage, audit_service)
