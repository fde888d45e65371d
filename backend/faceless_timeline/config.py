from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="FVT_",
        env_file=(PROJECT_ROOT / ".env", BACKEND_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    output_dir: Path = PROJECT_ROOT / "data" / "render_plans"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Timeline defaults
    default_fps: float = 30.0
    default_segment_duration: float = 5.0  # floor applied by the project layer, never the engine

    # Word index cache (entries, keyed by segment id, version and timing content)
    word_index_cache_size: int = 512

    # Export
    export_progress_interval: int = 30  # frames between progress events


settings = Settings()
