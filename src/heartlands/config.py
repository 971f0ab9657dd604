"""Runtime configuration for the Heartlands collection engine."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="HEARTLANDS_", env_file=".env", extra="ignore")

    app_name: str = "heartlands"
    log_level: str = "INFO"
    data_dir: Path = Field(
        default=Path("~/.heartlands"),
        description="Directory holding the progress ledger and player identity.",
    )
    progress_file: str = "progress.json"
    identity_file: str = "identity"
    catalog_path: str | None = Field(
        default=None,
        description="Optional JSON quest catalog; the bundled demo catalog is used when unset.",
    )
    heading_min_interval_ms: int = 100
    max_fix_speed_mps: float = 5.0
    default_collection_radius_m: float = 80.0
    latitude_corrected_offsets: bool = False

    @property
    def progress_path(self) -> Path:
        return self.data_dir.expanduser() / self.progress_file

    @property
    def identity_path(self) -> Path:
        return self.data_dir.expanduser() / self.identity_file


settings = Settings()
