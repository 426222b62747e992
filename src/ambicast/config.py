"""
AmbiCast Configuration
======================

This module handles configuration loading for the relay.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    AMBICAST_JOINTSPACE_HOST        -> jointspace.host
    AMBICAST_JOINTSPACE_PORT        -> jointspace.port
    AMBICAST_JOINTSPACE_API_VERSION -> jointspace.api_version
    AMBICAST_MULTICAST_GROUP        -> multicast.group_address
    AMBICAST_MULTICAST_PORT         -> multicast.port
    AMBICAST_REFRESH_MILLIS         -> refresh_rate.millis
    AMBICAST_SAMPLER_BACKEND        -> sampler.backend
    AMBICAST_LOG_LEVEL              -> logging.level

Example config.yml:
    jointspace:
      host: 192.168.1.20
    multicast:
      group_address: 237.36.35.34
      port: 41414
    refresh_rate:
      millis: 33
"""

import ipaddress
import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class JointSpaceConfig(BaseModel):
    """JointSPACE device connection configuration."""

    host: Optional[str] = Field(
        default=None,
        description="Hostname or IP address of the JointSPACE enabled device",
    )
    port: int = Field(default=1925, ge=1, le=65535, description="JointSPACE server port")
    api_version: str = Field(default="1", description="JointSPACE API version")
    timeout_seconds: float = Field(
        default=1.0,
        gt=0,
        description="HTTP timeout for each request",
    )


class MulticastConfig(BaseModel):
    """Multicast destination configuration."""

    group_address: str = Field(
        default="237.36.35.34",
        description="Multicast group address to forward Ambilight data to",
    )
    port: int = Field(default=41414, ge=1, le=65535, description="Multicast client port")
    ttl: int = Field(default=1, ge=0, le=255, description="Multicast TTL")

    @field_validator("group_address")
    @classmethod
    def _must_be_multicast(cls, value: str) -> str:
        address = ipaddress.ip_address(value)
        if not address.is_multicast:
            raise ValueError(f"{value} is not a multicast address")
        return value


class RefreshRateConfig(BaseModel):
    """Sampling cadence configuration."""

    millis: int = Field(default=33, ge=1, description="Ambilight sampling rate in milliseconds")


class SamplerConfig(BaseModel):
    """Sampler backend configuration."""

    backend: str = Field(
        default="jointspace",
        description="Sampler backend: 'jointspace' or 'mock'",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for AmbiCast.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    jointspace: JointSpaceConfig = Field(default_factory=JointSpaceConfig)
    multicast: MulticastConfig = Field(default_factory=MulticastConfig)
    refresh_rate: RefreshRateConfig = Field(default_factory=RefreshRateConfig)
    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

SEARCH_PATHS = (
    Path("config.yml"),
    Path("config.yaml"),
    Path("/etc/ambicast/config.yml"),
)


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        for path in SEARCH_PATHS:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Device settings
    if env_host := os.environ.get("AMBICAST_JOINTSPACE_HOST"):
        config_data.setdefault("jointspace", {})["host"] = env_host
    if env_port := os.environ.get("AMBICAST_JOINTSPACE_PORT"):
        config_data.setdefault("jointspace", {})["port"] = int(env_port)
    if env_api := os.environ.get("AMBICAST_JOINTSPACE_API_VERSION"):
        config_data.setdefault("jointspace", {})["api_version"] = env_api

    # Multicast settings
    if env_group := os.environ.get("AMBICAST_MULTICAST_GROUP"):
        config_data.setdefault("multicast", {})["group_address"] = env_group
    if env_mport := os.environ.get("AMBICAST_MULTICAST_PORT"):
        config_data.setdefault("multicast", {})["port"] = int(env_mport)

    # Cadence
    if env_millis := os.environ.get("AMBICAST_REFRESH_MILLIS"):
        config_data.setdefault("refresh_rate", {})["millis"] = int(env_millis)

    # Sampler backend
    if env_backend := os.environ.get("AMBICAST_SAMPLER_BACKEND"):
        config_data.setdefault("sampler", {})["backend"] = env_backend

    # Logging settings
    if env_log := os.environ.get("AMBICAST_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "thread": "%(threadName)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
