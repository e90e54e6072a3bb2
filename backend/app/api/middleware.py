from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from app.schemas.error import ErrorResponse
from app.utils.exceptions import SignatureEngineError
import logging

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str, field: str = None, details: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(ErrorResponse.build(code, message, field, details).model_dump())
    )


async def error_handler_middleware(request: Request, call_next):
    """Global error handler middleware that converts exceptions to structured error responses."""
    try:
        return await call_next(request)
    except SignatureEngineError as e:
        if e.status_code >= 500:
            logger.error(f"Signature engine error: {e.code} - {e.message}")
        else:
            logger.warning(f"Signature engine error: {e.code} - {e.message}")
        return _error_response(e.status_code, e.code, e.message, e.field, e.details)
    except HTTPException as e:
        logger.warning(f"HTTP Exception: {e.status_code} - {e.detail}")
        return _error_response(e.status_code, "HTTP_EXCEPTION", str(e.detail), details={"status_code": e.status_code})
    except Exception as e:
        # Catch-all for unexpected errors
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return _error_response(
            500,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred",
            details={"error_type": type(e).__name__}
        )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies in the same envelope as ValidationError."""
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return _error_response(
        400,
        "VALIDATION_ERROR",
        "Invalid request body",
        details={"errors": exc.errors()}
    )
