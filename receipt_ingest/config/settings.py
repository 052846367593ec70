from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pymupdf"
    preview_target_width: int = 160

    category_keywords_path: Path | None = None

    ocr_provider: str = "example"
    ocr_api_key: str = ""
    ocr_model_name: str = "gpt-4o-mini"
    ocr_base_url: str = ""
    ocr_timeout_seconds: int = 30
    ocr_temperature: float = 0.0
