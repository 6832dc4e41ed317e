# services/api/settings.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field
from typing import List
from pathlib import Path

class Settings(BaseSettings):
    # Remote renderer (the worker that composes the packet PDF)
    renderer_base_url: str = "https://pdf-packet-generator.maxterra-pdf-builder.workers.dev"

    # Hard deadline for the /generate-packet call (seconds).
    # The worker merges every document, so big packets can take a while.
    renderer_timeout_seconds: float = 120.0

    # Deadline for each individual document download (seconds)
    document_fetch_timeout_seconds: float = 30.0

    # Storage settings
    # STORAGE_BACKEND=sqlite (default) or json (demo / tests)
    storage_backend: str = "sqlite"
    db_url: str = "sqlite:///data/packets.db"
    json_data_dir: str = "data"

    # Binary storage for uploaded PDFs, served back under /files
    files_dir: str = "data/files"
    public_base_url: str = "http://localhost:8000"

    # Upload limits
    max_upload_bytes: int = 50 * 1024 * 1024
    min_upload_bytes: int = 1024

    # ---- Artifact presenter (local preview / download) ----

    # Where download() drops finished packets
    download_dir: str = Field(
        default=str(Path.home() / "Downloads"),
        description="Directory used as the save target for downloaded packets",
    )

    # How long a previewed temp PDF lives before it is released
    preview_release_seconds: float = 5.0

    # CORS settings
    allowed_origins: str = "http://localhost:3000,http://localhost:5173,http://localhost:8000"

    model_config = ConfigDict(
        # Always load .env from the same folder as this settings.py
        env_file=str(Path(__file__).resolve().parent / ".env"),
        extra="ignore",
    )

    def get_origins_list(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        if not self.allowed_origins:
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


_settings_instance = None

def get_settings() -> Settings:
    """Singleton pattern for settings."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
