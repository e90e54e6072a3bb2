from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


FieldType = Literal["text", "date", "signature"]


class FieldDescriptor(BaseModel):
    """One overlay: target page, ratio box (top-left origin) and value."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    type: FieldType
    x_ratio: float = Field(alias="xRatio")
    y_ratio: float = Field(alias="yRatio")
    w_ratio: float = Field(alias="wRatio")
    h_ratio: float = Field(alias="hRatio")
    value: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class FinalizeRequest(BaseModel):
    document_id: str = Field(validation_alias=AliasChoices("pdfId", "documentId", "document_id"))
    fields: List[FieldDescriptor] = Field(default_factory=list)

    @field_validator("document_id", mode="before")
    @classmethod
    def validate_document_id(cls, v):
        if v is None:
            raise ValueError("pdfId is required")
        normalized = str(v).strip()
        if not normalized:
            raise ValueError("pdfId is required")
        return normalized


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(serialization_alias="pdfId")
    url: str


class AuditHashes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_hash: str = Field(serialization_alias="originalHash")
    final_hash: str = Field(serialization_alias="finalHash")


class FieldOutcomeResponse(BaseModel):
    index: int
    page: int
    type: str
    status: Literal["applied", "skipped"]
    reason: Optional[str] = None


class FinalizeResponse(BaseModel):
    url: str
    audit: AuditHashes
    fields: List[FieldOutcomeResponse] = Field(default_factory=list)


class DocumentAuditResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    document_id: str = Field(serialization_alias="documentId")
    original_hash: str = Field(serialization_alias="originalHash")
    final_hash: str = Field(serialization_alias="finalHash")
    created_at: datetime = Field(serialization_alias="createdAt")
