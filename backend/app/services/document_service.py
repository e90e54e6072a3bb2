import logging
import uuid
from dataclasses import dataclass

from app.config import settings
from app.services.storage_service import DocumentStorage
from app.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


def new_document_id() -> str:
    return uuid.uuid4().hex


@dataclass
class UploadResult:
    document_id: str
    relative_path: str
    url: str


class DocumentService:
    """Accepts uploaded PDFs into the original area."""

    def __init__(self, storage: DocumentStorage):
        self.storage = storage

    @staticmethod
    def check_size(size: int) -> None:
        if size > settings.max_upload_bytes:
            raise ValidationError(
                f"PDF exceeds the {settings.max_upload_mb} MB upload limit",
                field="pdf",
                details={"size": size, "limit": settings.max_upload_bytes},
            )

    def upload(self, data: bytes) -> UploadResult:
        if not data:
            raise ValidationError("No PDF uploaded", field="pdf")
        self.check_size(len(data))

        document_id = new_document_id()
        relative_path = self.storage.save_original(document_id, data)
        return UploadResult(
            document_id=document_id,
            relative_path=relative_path,
            url=settings.public_url(relative_path),
        )
