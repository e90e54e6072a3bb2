import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: str
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
    request_id: Optional[str] = None

    @classmethod
    def build(cls, code: str, message: str, field: Optional[str] = None,
              details: Optional[Dict[str, Any]] = None) -> "ErrorResponse":
        """Error envelope with a fresh request id."""
        return cls(
            error=ErrorDetail(code=code, message=message, field=field, details=details),
            request_id=str(uuid.uuid4()),
        )
