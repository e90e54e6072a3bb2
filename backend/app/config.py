import json
from typing import Any, List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "https://signature-engine-frontend-theta.vercel.app",
    "https://signature-engine-frontend-4djgs54ek.vercel.app",
]


class Settings(BaseSettings):
    # Database (audit records)
    database_url: str

    # Public URL prefix used to build retrieval links for stored files
    base_url: str

    # Storage
    storage_root: str = "uploads"
    original_dir: str = "original"
    signed_dir: str = "signed"
    # Temp area for finalized output before it is renamed into signed_dir.
    # Must not be under storage_root; defaults to "{storage_root}-staging".
    staging_root: Optional[str] = None
    max_upload_mb: int = 25

    # Field rendering
    text_font_name: str = "Helvetica"
    text_font_size: int = 11

    # CORS
    # Raw string on purpose: pydantic-settings would json.loads() a List[str]
    # field and crash on a plain comma-separated value.
    cors_origins: Optional[str] = None

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def public_url(self, relative_path: str) -> str:
        """Build the retrieval URL for a file stored under storage_root."""
        return f"{self.base_url.rstrip('/')}/files/{relative_path.lstrip('/')}"

    def get_cors_origins(self) -> list[str]:
        """Return the allowed CORS origins.

        Parsing rules:
        - None -> built-in frontend origins
        - empty/whitespace -> []
        - JSON list string (starts with '[') -> parsed list
        - otherwise -> comma-separated list
        """
        return self._parse_origins(self.cors_origins)

    @staticmethod
    def _parse_origins(raw_value: Optional[str]) -> list[str]:
        if raw_value is None:
            return list(DEFAULT_CORS_ORIGINS)

        raw = str(raw_value).strip()
        if not raw:
            return []

        items: List[Any]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                items = parsed
            else:
                items = raw.strip("[]").split(",")
        else:
            items = raw.split(",")

        origins: list[str] = []
        for item in items:
            origin = str(item).strip().strip('"').rstrip("/")
            if origin:
                origins.append(origin)
        return origins


settings = Settings()
