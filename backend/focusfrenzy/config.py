"""
Focus Frenzy Capture Service — Application Configuration
==========================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Read by the application factory, which hands the relevant values
       to the CaptureStore and the route handlers.
When:  Loaded once at module import time.

Design Decision:
    The captures directory is a setting, not a module constant. The factory
    passes it into the CaptureStore at construction so that tests can point
    a fresh app at a temporary directory without patching globals.
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Game page and its assets ship inside the package
DEFAULT_PUBLIC_DIR = str(Path(__file__).parent / "public")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for running the game locally.
    Attributes are grouped by concern for readability.
    """

    # ── Service Identity ──────────────────────────────────────────────────
    service_name: str = Field(default="Focus Frenzy - Local Capture Edition")

    # ── Capture Storage ───────────────────────────────────────────────────
    # What: Directory holding one .jpg per capture, relative to the CWD
    # Created lazily on the first upload, never at startup
    captures_dir: str = Field(default="./captures")

    # What: Maximum accepted image size in bytes
    # Default: 10MB = 10 * 1024 * 1024 = 10485760 (inclusive)
    max_capture_size: int = Field(default=10_485_760, ge=1024, le=52_428_800)

    # ── Static Game Page ──────────────────────────────────────────────────
    public_dir: str = Field(default=DEFAULT_PUBLIC_DIR)

    # ── Gallery ───────────────────────────────────────────────────────────
    # What: Seconds between passive reloads of /view-captures
    gallery_refresh_seconds: int = Field(default=30, ge=5, le=3600)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PORT and port both work
    }


# Singleton instance: used by the module-level app in main.py
settings = Settings()
