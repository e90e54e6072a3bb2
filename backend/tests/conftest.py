"""Shared fixtures for the backend tests.

Settings are loaded at import time, so the environment must be prepared
before anything under ``app`` is imported.
"""

import base64
import io
import os
import sys
import tempfile

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("BASE_URL", "http://testserver")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="signature-engine-"))

import pytest
from PIL import Image, ImageDraw
from reportlab.pdfgen import canvas
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture
def db_session():
    """Patch app.database onto a fresh in-memory SQLite DB."""
    import app.database as database
    from app.database import Base
    from app import models  # noqa: F401  # ensure models are registered

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    prev_engine, prev_session_local = database.engine, database.SessionLocal
    database.engine = engine
    database.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
        database.engine, database.SessionLocal = prev_engine, prev_session_local


@pytest.fixture
def storage(tmp_path):
    from app.services.storage_service import DocumentStorage

    store = DocumentStorage(root=str(tmp_path / "uploads"))
    store.ensure_areas()
    return store


def make_pdf(page_sizes=((612, 792),), label: str = None) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=page_sizes[0])
    for i, size in enumerate(page_sizes):
        pdf.setPageSize(size)
        if label:
            pdf.drawString(20, 20, f"{label} page {i + 1}")
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def make_signature(width: int = 200, height: int = 100, image_format: str = "PNG") -> str:
    img = Image.new("RGB", (width, height), color=(255, 255, 255))
    draw = ImageDraw.Draw(img)
    draw.line([0, height // 2, width, height // 2], fill=(0, 0, 160), width=3)

    buffered = io.BytesIO()
    img.save(buffered, format=image_format)
    mime = "image/jpeg" if image_format == "JPEG" else "image/png"
    return f"data:{mime};base64," + base64.b64encode(buffered.getvalue()).decode()


@pytest.fixture
def pdf_factory():
    return make_pdf


@pytest.fixture
def signature_factory():
    return make_signature
