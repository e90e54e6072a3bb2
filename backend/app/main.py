from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from app.config import settings
from app.api.middleware import error_handler_middleware, request_validation_handler
from app.api.routes import audit, documents
from app.database import dispose_engine, init_db
from app.services.storage_service import DocumentStorage
import logging

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        DocumentStorage().ensure_areas()
        init_db()
        logger.info("Application started")
    except Exception as e:
        logger.error(f"Error during startup: {e}")
        raise
    yield
    # Shutdown
    try:
        dispose_engine()
        logger.info("Application shutdown")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


app = FastAPI(
    title="Signature Engine API",
    description="Overlay text, date and signature fields onto PDFs with a hashed audit trail",
    version="1.0.0",
    lifespan=lifespan
)

app.middleware("http")(error_handler_middleware)

# CORS middleware (outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.add_exception_handler(RequestValidationError, request_validation_handler)

# Include routers
app.include_router(documents.router)
app.include_router(audit.router)

# Stored originals and finalized copies, read-only
app.mount("/files", StaticFiles(directory=settings.storage_root, check_dir=False), name="files")


@app.get("/")
def root():
    return {"message": "Signature Engine API", "version": "1.0.0"}


@app.get("/health")
def health():
    return {"status": "healthy"}
