"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ZONE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Zone Boundary & Fare Engine"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level for the service.")

    hit_test_threshold_degrees: float = Field(
        default=0.0005,
        gt=0.0,
        description="Planar distance (degrees) under which a tap hits an existing boundary point.",
    )
    min_boundary_vertices: int = Field(default=3, ge=3)
    strict_simple_polygons: bool = Field(
        default=False,
        description="Reject self-intersecting boundaries when finishing a drawing.",
    )
    repository_timeout_seconds: float = Field(default=15.0, gt=0.0)
    cascade_renames: bool = Field(
        default=True,
        description="Rewrite fare and compatibility references when a boundary is renamed.",
    )
    locator_cache_seconds: float = Field(default=300.0, ge=0.0)

    storage_backend: Literal["memory", "supabase"] = Field(
        default="memory",
        description="Repository implementation used by the API.",
    )
    zone_boundaries_table: str = "zone_boundaries"
    fare_batches_table: str = "boundary_fares"

    legacy_boundaries_file: Path = Field(
        default=Path(__file__).parent / "data" / "legacy_boundaries.json",
        description="Polygons loaded by the one-time boundary seed.",
    )
    seed_legacy_boundaries: bool = Field(
        default=False,
        description="Seed legacy boundaries at startup when the store is empty.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("legacy_boundaries_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: Any) -> str:
        return str(value or "INFO").strip().upper()


settings = Settings()
