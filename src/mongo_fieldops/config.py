from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mongo_fieldops.exceptions import ConfigurationError


class EnvConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MFIELD_", case_sensitive=False)

    mongodb_uri: Optional[str] = None
    default_db: Optional[str] = None
    concurrency: Optional[int] = None
    log_level: Optional[str] = None


class FileConfig(BaseModel):
    mongodb_uri: Optional[str] = None
    default_db: Optional[str] = None
    concurrency: Optional[int] = None
    log_level: Optional[str] = None


class RuntimeConfig(BaseModel):
    mongodb_uri: str = Field(..., description="MongoDB connection string")
    default_db: str = Field(..., description="Default database")
    concurrency: int = Field(0, ge=0, description="Max in-flight writes per fan-out, 0 for unbounded")
    log_level: str = "WARNING"


DEFAULT_CONFIG_PATH = Path.cwd() / ".mfield.yml"
LOCAL_CONFIG_PATH = Path.cwd() / ".mfield.local.yml"


def load_file_config(path: Path = DEFAULT_CONFIG_PATH) -> FileConfig:
    if not path.exists():
        return FileConfig()

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping.")
    return FileConfig(**data)


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


def load_runtime_config(path: Path = DEFAULT_CONFIG_PATH) -> RuntimeConfig:
    """Load configuration with priority: env vars > local file > main file."""
    file_config = load_file_config(path)

    # Load local override file (gitignored, for safe local testing)
    local_path = path.parent / ".mfield.local.yml" if path != DEFAULT_CONFIG_PATH else LOCAL_CONFIG_PATH
    local_config = load_file_config(local_path)

    env_config = EnvConfig()

    # Priority: env > local > file
    mongodb_uri = env_config.mongodb_uri or local_config.mongodb_uri or file_config.mongodb_uri
    default_db = env_config.default_db or local_config.default_db or file_config.default_db
    concurrency = _first_set(env_config.concurrency, local_config.concurrency, file_config.concurrency)
    log_level = env_config.log_level or local_config.log_level or file_config.log_level

    if not mongodb_uri:
        raise ConfigurationError("Missing MongoDB URI. Set in .mfield.yml, .mfield.local.yml, or MFIELD_MONGODB_URI.")
    if not default_db:
        raise ConfigurationError("Missing default DB. Set in .mfield.yml, .mfield.local.yml, or MFIELD_DEFAULT_DB.")

    return RuntimeConfig(
        mongodb_uri=mongodb_uri,
        default_db=default_db,
        concurrency=concurrency or 0,
        log_level=(log_level or "WARNING").upper(),
    )


def write_default_config(path: Path = DEFAULT_CONFIG_PATH) -> Path:
    if path.exists():
        return path

    content = {
        "mongodb_uri": "mongodb://localhost:27017",
        "default_db": "myapp",
        "concurrency": 0,
        "log_level": "WARNING",
    }
    path.write_text(yaml.safe_dump(content, sort_keys=False))
    return path
