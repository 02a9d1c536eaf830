"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    env: str = "development"
    log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Conversion defaults for requests that leave them unset
    default_flatness_tolerance: float = 0.25
    default_max_subdivision_depth: int = 10

    # Reject larger uploads with 413
    max_svg_bytes: int = 1_000_000

    model_config = {"env_prefix": "SVG2PDC_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
