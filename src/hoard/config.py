"""Configuration management for hoard."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MARKER_DIR_NAME = ".hoard"
OBJECTS_DIR_NAME = "objects"
BY_HASH_DIR_NAME = "by-hash"
BY_NAME_DIR_NAME = "by-name"
MANIFEST_NAME = "manifest.json"


class HoardConfig(BaseSettings):
    """Runtime settings for hoard, read from HOARD_* environment variables."""

    log_level: str = Field(default="INFO", description="Minimum level for log sinks")
    log_file: Optional[Path] = Field(
        default=None, description="Write logs to this file in addition to any console sink"
    )
    console_logging: bool = Field(default=False, description="Log to stderr")
    manifest_name: str = Field(
        default=MANIFEST_NAME, description="File name of the manifest inside the marker directory"
    )

    model_config = SettingsConfigDict(
        env_prefix="HOARD_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )


class RepositoryLayout(BaseModel):
    """Reserved paths of a hoard repository rooted at `root`.

    ```
    root/
    └── .hoard/
        ├── manifest.json
        └── objects/
            ├── by-hash/ab/cdef...   content-addressed pool
            └── by-name/<name>       one symlink per named object
    ```
    """

    root: Path
    manifest_name: str = MANIFEST_NAME

    @property
    def marker_dir(self) -> Path:
        return self.root / MARKER_DIR_NAME

    @property
    def objects_dir(self) -> Path:
        return self.marker_dir / OBJECTS_DIR_NAME

    @property
    def by_hash_dir(self) -> Path:
        """Root of the object store."""
        return self.objects_dir / BY_HASH_DIR_NAME

    @property
    def by_name_dir(self) -> Path:
        """Directory holding the name index references."""
        return self.objects_dir / BY_NAME_DIR_NAME

    @property
    def manifest_path(self) -> Path:
        return self.marker_dir / self.manifest_name


# Load config
config = HoardConfig()
