class SignatureEngineError(Exception):
    """Base exception for signature engine API errors"""
    def __init__(self, code: str, message: str, status_code: int = 400, field: str = None, details: dict = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.field = field
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(SignatureEngineError):
    def __init__(self, message: str, field: str = None, details: dict = None):
        super().__init__("VALIDATION_ERROR", message, 400, field, details)


class NotFoundError(SignatureEngineError):
    def __init__(self, resource: str, resource_id: str = None):
        message = f"{resource} not found"
        if resource_id:
            message += f": {resource_id}"
        super().__init__("NOT_FOUND", message, 404, details={"resource": resource, "resource_id": resource_id})


class DecodeError(SignatureEngineError):
    """Signature image or stored PDF bytes could not be decoded."""
    def __init__(self, message: str, field: str = None, details: dict = None):
        super().__init__("DECODE_ERROR", message, 422, field, details)


class StorageError(SignatureEngineError):
    def __init__(self, operation: str, file_path: str, reason: str = None):
        message = f"File {operation} failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__("STORAGE_ERROR", message, 500, details={"operation": operation, "file_path": file_path})


class PersistenceError(SignatureEngineError):
    def __init__(self, operation: str, reason: str = None):
        message = f"Audit store {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__("PERSISTENCE_ERROR", message, 500, details={"operation": operation})


class DocumentNotFoundError(NotFoundError):
    """Stored original PDF not found"""
    def __init__(self, document_id: str = None):
        super().__init__("PDF", document_id)
