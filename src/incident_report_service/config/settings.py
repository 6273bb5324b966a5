"""
Incident Report Service Settings

Configuration management using Pydantic settings with environment variable support.
"""

from typing import List, Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Incident Report Service configuration"""

    # Service Configuration
    service_name: str = Field(default="incident-report-service", description="Service name")
    environment: str = Field(default="development", description="Environment (development, production)")
    port: int = Field(default=8005, description="Service port")
    host: str = Field(default="0.0.0.0", description="Service host")

    # Report Generation (the only credential this service consumes)
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
        description="API key for the report-generation model"
    )
    gemini_model: str = Field(default="gemini-2.5-flash", description="Model used for report generation")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language REST base URL"
    )
    generation_timeout_seconds: Optional[float] = Field(
        default=60.0,
        description="Caller-imposed timeout for one generation; expiry substitutes the fallback report"
    )

    # Evidence Storage
    # Handles live only as long as the process; nothing here is persisted across sessions
    storage_local_path: str = Field(
        default="./data/session-evidence",
        description="Directory holding evidence files for the current session"
    )

    # Document Export (millimetres, A4 portrait by default)
    pdf_page_width_mm: float = Field(default=210.0, description="Page width")
    pdf_page_height_mm: float = Field(default=297.0, description="Page height")
    pdf_margin_mm: float = Field(default=15.0, description="Left/right margin")
    pdf_top_mm: float = Field(default=20.0, description="First baseline on each page")
    pdf_page_break_threshold_mm: float = Field(
        default=280.0,
        description="Start a new page when a block would end below this line"
    )

    # CORS Configuration
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    @property
    def generate_content_url(self) -> str:
        """Full generateContent endpoint for the configured model"""
        return f"{self.gemini_base_url.rstrip('/')}/models/{self.gemini_model}:generateContent"


# Global settings instance
settings = Settings()
