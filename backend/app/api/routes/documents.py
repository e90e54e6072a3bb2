from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.dependencies import get_document_service, get_finalization_service
from app.config import settings
from app.schemas.document import (
    AuditHashes,
    FieldOutcomeResponse,
    FinalizeRequest,
    FinalizeResponse,
    UploadResponse,
)
from app.services.document_service import DocumentService
from app.services.finalization_service import FinalizationService
from app.utils.exceptions import ValidationError

router = APIRouter(tags=["documents"])


@router.post("/upload-pdf", response_model=UploadResponse)
async def upload_pdf(
    pdf: Optional[UploadFile] = File(None),
    service: DocumentService = Depends(get_document_service),
):
    """Store an uploaded PDF and return its id and retrieval URL"""
    if pdf is None:
        raise ValidationError("No PDF uploaded", field="pdf")

    if pdf.size is not None:
        service.check_size(pdf.size)

    # One byte past the limit is enough for upload() to reject it.
    data = await pdf.read(settings.max_upload_bytes + 1)
    result = service.upload(data)
    return UploadResponse(document_id=result.document_id, url=result.url)


@router.post("/finalize-pdf", response_model=FinalizeResponse)
def finalize_pdf(
    request: FinalizeRequest,
    service: FinalizationService = Depends(get_finalization_service),
):
    """Overlay fields onto a stored PDF, save the finalized copy and audit it"""
    result = service.finalize(request.document_id, request.fields)
    return FinalizeResponse(
        url=result.url,
        audit=AuditHashes(original_hash=result.original_hash, final_hash=result.final_hash),
        fields=[
            FieldOutcomeResponse(
                index=o.index,
                page=o.page,
                type=o.type,
                status=o.status,
                reason=o.reason,
            )
            for o in result.outcomes
        ],
    )
