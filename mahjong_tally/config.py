from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    storage_backend: Literal["memory", "file", "gcs"] = "memory"
    games_file: str = "mahjong-scorer-games.json"
    gcs_bucket_name: str | None = None
    gcs_games_prefix: str = "mahjong-games"
    default_base_points: int = 8
    default_rotate_winds: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="MAHJONG_")


settings = Settings()
