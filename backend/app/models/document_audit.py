import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from app.database import Base


class DocumentAudit(Base):
    """Append-only before/after hash record for one finalize operation"""
    __tablename__ = "document_audits"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    document_id = Column(String(64), nullable=False, index=True)
    original_hash = Column(String(64), nullable=False)  # hex sha-256 of the uploaded bytes
    final_hash = Column(String(64), nullable=False)     # hex sha-256 of the delivered bytes
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
