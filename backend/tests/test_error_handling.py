#!/usr/bin/env python3
"""Tests for error handling functionality"""

import sys
sys.path.append('.')

import asyncio
import json

from app.utils.exceptions import (
    SignatureEngineError, ValidationError, NotFoundError, DocumentNotFoundError,
    DecodeError, StorageError, PersistenceError
)
from app.schemas.error import ErrorResponse


def test_signature_engine_error_creation():
    """Test SignatureEngineError base class"""
    error = SignatureEngineError("TEST_ERROR", "Test message", 400, "field1", {"key": "value"})

    assert error.code == "TEST_ERROR"
    assert error.message == "Test message"
    assert error.status_code == 400
    assert error.field == "field1"
    assert error.details == {"key": "value"}
    print("[PASS] SignatureEngineError creation test passed")


def test_validation_error():
    """Test ValidationError"""
    error = ValidationError("No PDF uploaded", field="pdf")

    assert error.code == "VALIDATION_ERROR"
    assert error.status_code == 400
    assert error.field == "pdf"
    assert error.details == {}
    print("[PASS] ValidationError test passed")


def test_not_found_error():
    """Test NotFoundError and the PDF-specific subclass"""
    error = DocumentNotFoundError("abc123")

    assert isinstance(error, NotFoundError)
    assert error.code == "NOT_FOUND"
    assert error.message == "PDF not found: abc123"
    assert error.status_code == 404
    assert error.details == {"resource": "PDF", "resource_id": "abc123"}
    print("[PASS] NotFoundError test passed")


def test_decode_error():
    """Test DecodeError"""
    error = DecodeError("Signature image is not valid base64", field="value")

    assert error.code == "DECODE_ERROR"
    assert error.status_code == 422
    assert error.field == "value"
    print("[PASS] DecodeError test passed")


def test_storage_error():
    """Test StorageError"""
    error = StorageError("read", "/path/to/file", "Permission denied")

    assert error.code == "STORAGE_ERROR"
    assert error.message == "File read failed for /path/to/file: Permission denied"
    assert error.status_code == 500
    print("[PASS] StorageError test passed")


def test_persistence_error():
    """Test PersistenceError"""
    error = PersistenceError("insert", "connection refused")

    assert error.code == "PERSISTENCE_ERROR"
    assert error.message == "Audit store insert failed: connection refused"
    assert error.status_code == 500
    assert error.details == {"operation": "insert"}
    print("[PASS] PersistenceError test passed")


def test_error_response_json():
    """Test that ErrorResponse can be serialized to JSON"""
    response = ErrorResponse.build("TEST_ERROR", "Test message", "test_field", {"key": "value"})
    json_data = response.model_dump()

    assert json_data["error"] == {
        "code": "TEST_ERROR",
        "message": "Test message",
        "field": "test_field",
        "details": {"key": "value"}
    }
    assert json_data["request_id"]
    print("[PASS] ErrorResponse JSON serialization test passed")


def test_middleware_converts_engine_errors():
    """Middleware turns a raised SignatureEngineError into the error envelope"""
    from app.api.middleware import error_handler_middleware

    async def call_next(request):
        raise DecodeError("bad image", field="value")

    response = asyncio.run(error_handler_middleware(None, call_next))
    body = json.loads(response.body)

    assert response.status_code == 422
    assert body["error"]["code"] == "DECODE_ERROR"
    assert body["error"]["field"] == "value"
    print("[PASS] middleware converts engine errors")


def test_middleware_hides_unexpected_errors():
    """Unexpected exceptions become a generic 500"""
    from app.api.middleware import error_handler_middleware

    async def call_next(request):
        raise RuntimeError("boom")

    response = asyncio.run(error_handler_middleware(None, call_next))
    body = json.loads(response.body)

    assert response.status_code == 500
    assert body["error"]["code"] == "INTERNAL_SERVER_ERROR"
    assert body["error"]["details"] == {"error_type": "RuntimeError"}
    assert "boom" not in body["error"]["message"]
    print("[PASS] middleware hides unexpected errors")


if __name__ == "__main__":
    print("Running error handling tests...")
    print()

    test_signature_engine_error_creation()
    test_validation_error()
    test_not_found_error()
    test_decode_error()
    test_storage_error()
    test_persistence_error()

    test_error_response_json()
    test_middleware_converts_engine_errors()
    test_middleware_hides_unexpected_errors()

    print()
    print("[SUCCESS] All tests passed!")
