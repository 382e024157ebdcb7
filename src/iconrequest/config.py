"""Configuration loading and validation."""

import os
from enum import Enum
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

ENDPOINT_ENV = "ICONREQUEST_STATISTICS_ENDPOINT"
TOKEN_ENV = "ICONREQUEST_STATISTICS_TOKEN"

# Keys in the resource file
ENDPOINT_KEY = "statistics_service_endpoint"
TOKEN_KEY = "statistics_service_token"


class UploadMode(str, Enum):
    """Whether the upload result decides the outcome of a submission."""

    AUTHORITATIVE = "authoritative"
    BEST_EFFORT = "best-effort"


class ServiceConfig(BaseModel):
    """Statistics service endpoint and bearer token."""

    endpoint: str = ""
    token: str = ""

    @field_validator("endpoint", "token", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        """Treat missing values as empty and strip whitespace."""
        return "" if v is None else str(v).strip()

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Paths are appended to the endpoint, so drop a trailing slash."""
        return v.rstrip("/")


class TransportConfig(BaseModel):
    """HTTP timeouts and connection pool sizing."""

    connect_timeout: float = 30.0
    read_timeout: float = 60.0
    pool_maxsize: int = 10


class ArchiveConfig(BaseModel):
    """Local archive built in best-effort mode."""

    output_dir: Path = Path("./icon_requests")
    share_subject: str = "Icon Request"

    @field_validator("output_dir", mode="before")
    @classmethod
    def expand_path(cls, v: str) -> Path:
        """Expand environment variables and ~ in path."""
        expanded = os.path.expandvars(os.path.expanduser(str(v)))
        return Path(expanded)


class UploadConfig(BaseModel):
    """Upload pipeline configuration."""

    batch_size: int = 10
    max_concurrency: int = 10
    mode: UploadMode = UploadMode.AUTHORITATIVE
    language_code: str | None = None
    transport: TransportConfig = TransportConfig()
    archive: ArchiveConfig = ArchiveConfig()

    @field_validator("batch_size", "max_concurrency")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v


def load_app_config(env_file: Path | None = None) -> ServiceConfig:
    """Load the application-wide service config from the environment (and .env)."""
    load_dotenv(dotenv_path=env_file, override=False)
    return ServiceConfig(
        endpoint=os.getenv(ENDPOINT_ENV),
        token=os.getenv(TOKEN_ENV),
    )


def load_resource_config(resource_path: Path | None) -> ServiceConfig:
    """Load endpoint and token from the resource file, if there is one."""
    if resource_path is None or not resource_path.exists():
        return ServiceConfig()

    with open(resource_path) as f:
        data = yaml.safe_load(f) or {}

    return ServiceConfig(endpoint=data.get(ENDPOINT_KEY), token=data.get(TOKEN_KEY))


def resolve_service_config(primary: ServiceConfig, fallback: ServiceConfig) -> ServiceConfig:
    """
    Merge the two configuration tiers.

    Each value falls back independently: an empty endpoint in the primary
    store takes the fallback endpoint even if the primary token is set.
    """
    return ServiceConfig(
        endpoint=primary.endpoint or fallback.endpoint,
        token=primary.token or fallback.token,
    )


def load_service_config(
    resource_path: Path | None = None,
    env_file: Path | None = None,
) -> ServiceConfig:
    """Resolve the service config: resource file first, then the environment."""
    return resolve_service_config(load_resource_config(resource_path), load_app_config(env_file))


def load_upload_config(config_path: Path | None) -> UploadConfig:
    """Load upload pipeline configuration, using defaults when there is no file."""
    if config_path is None or not config_path.exists():
        return UploadConfig()

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return UploadConfig(**data)
