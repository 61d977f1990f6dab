"""Configuration management using Pydantic Settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Keys (only needed when the echo is matched automatically)
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")

    # Paths
    output_dir: Path = Field(default=Path("output"), alias="OUTPUT_DIR")
    assets_dir: Path = Field(default=Path("assets"), alias="ASSETS_DIR")

    # Font overrides, one per logical family
    font_jinghua_path: Optional[Path] = Field(default=None, alias="FONT_JINGHUA_PATH")
    font_courier_path: Optional[Path] = Field(default=None, alias="FONT_COURIER_PATH")
    font_noto_path: Optional[Path] = Field(default=None, alias="FONT_NOTO_PATH")

    # Raster output
    export_scale: float = Field(default=5.0, gt=0, alias="EXPORT_SCALE")
    preview_scale: float = Field(default=2.0, gt=0, alias="PREVIEW_SCALE")

    # Quote matching
    llm_model: str = Field(default="gpt-4o", alias="LLM_MODEL")
    llm_fallback_model: Optional[str] = Field(default="gpt-4o-mini", alias="LLM_FALLBACK_MODEL")
    llm_temperature: float = Field(default=0.9, alias="LLM_TEMPERATURE")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    gcp_project_id: Optional[str] = Field(default=None, alias="GCP_PROJECT_ID")

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @property
    def fonts_dir(self) -> Path:
        """Path to the bundled fonts directory."""
        return self.assets_dir / "fonts"

    @property
    def font_overrides(self) -> dict[str, Optional[Path]]:
        """Explicit font files keyed by logical family name."""
        return {
            "jinghua": self.font_jinghua_path,
            "courier": self.font_courier_path,
            "noto": self.font_noto_path,
        }


# Global settings instance
settings = Settings()
