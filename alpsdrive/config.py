from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8')

    app_name: str = 'alpsdrive'
    app_host: str = '127.0.0.1'
    app_port: int = 3000
    drive_root: Path = Path(tempfile.gettempdir()) / 'alpsdrive'
    staging_dirname: str = Field(default='tmp', pattern=r'^[\w-]+$')
    upload_chunk_bytes: int = Field(default=1024 * 1024, ge=4096, le=64 * 1024 * 1024)
    log_level: str = 'info'
    cors_origins: str = '*'


settings = Settings()
