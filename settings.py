import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_dir: Path = Path("./data")
    database_url: str = "sqlite:///data/thanksgiving.db"
    template_path: Path | None = None
    photos_per_grid: int = 6
    front_cover_title: str = "Maguire Family Thanksgiving"
    back_cover_title: str = "Thank You"
    s3_bucket_name: str | None = None
    aws_region: str = "us-east-1"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SBG_",
        env_file_encoding="utf-8",
    )

    @field_validator("photos_per_grid")
    @classmethod
    def photos_per_grid_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("photos_per_grid must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def output_dir(self) -> Path:
        return self.project_dir / "scrapbooks"

    @property
    def cache_dir(self) -> Path:
        return self.project_dir / ".cache"

    @property
    def mirror_enabled(self) -> bool:
        return bool(self.s3_bucket_name)
