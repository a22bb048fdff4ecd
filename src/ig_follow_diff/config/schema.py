"""Configuration schema definitions using Pydantic."""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from ..logging_config import LoggingConfig


class AppConfig(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = "ig-follow-diff"
    version: str = "0.1.0"


class LocatorConfig(BaseModel):
    """Where the following/followers path patterns come from."""

    model_config = ConfigDict(extra='forbid')

    patterns_file: Optional[str] = Field(
        default=None,
        description="Optional key = value pattern file"
    )
    following_files_path_regex: Optional[str] = Field(
        default=None,
        description="/pattern/flags literal matching following entries (overrides patterns_file)"
    )
    followers_files_path_regex: Optional[str] = Field(
        default=None,
        description="/pattern/flags literal matching followers entries (overrides patterns_file)"
    )


class ApiConfig(BaseModel):
    model_config = ConfigDict(extra='forbid')

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    enable_cors: bool = False
    cors_origins: List[str] = Field(default_factory=list)
    max_upload_mb: int = Field(default=512, ge=1)


class Config(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra='forbid')

    app: AppConfig = Field(default_factory=AppConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    locator: LocatorConfig = Field(default_factory=LocatorConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
