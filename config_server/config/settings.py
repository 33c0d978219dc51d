"""
Settings Management

Pydantic-based settings schema with environment variable support.

Priority: Environment variables > TOML config file > Defaults

Environment variables:
    DATA_DIR                      storage.data_dir
    LOG_LEVEL                     monitoring.log_level (accepts Information, Warning, ...)
    CONFIG_SERVER_CONFIG_FILE     path of the TOML file (default config-server.toml)
    CONFIG_SERVER_ENVIRONMENT     development | production | test
    CONFIG_SERVER_HOST            server.bind_host
    CONFIG_SERVER_PORT            server.bind_port
    CONFIG_SERVER_LOG_FORMAT      monitoring.log_format
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from config_server.data.storage.models import ResourceKind
from config_server.utils.config import load_config as load_toml_config


# =============================================================================
# Settings Schemas
# =============================================================================

class StorageSettings(BaseModel):
    """Resource storage layout."""
    data_dir: Path = Field(default_factory=lambda: Path("data"))
    json_subdir: str = "configs"
    text_subdir: str = "texts"


class MonitoringSettings(BaseModel):
    """Logging configuration."""
    log_level: str = "INFO"
    log_format: str = "text"  # text|json
    log_subdir: str = "logs"
    log_base_name: str = "server"
    log_retention_count: int = 10
    console_enabled: bool = True

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ('text', 'json'):
            raise ValueError("log_format must be 'text' or 'json'")
        return v

    @field_validator('log_retention_count')
    @classmethod
    def validate_retention(cls, v: int) -> int:
        if v < 1:
            raise ValueError("log_retention_count must be at least 1")
        return v


class ServerSettings(BaseModel):
    """HTTP bind configuration."""
    bind_host: str = "0.0.0.0"
    bind_port: int = 24025


class Settings(BaseModel):
    """
    Main application settings.

    Loads configuration from:
    1. TOML config file (config-server.toml)
    2. Environment variables
    3. Defaults defined in schemas
    """

    app_name: str = "Simple Config Server"
    app_version: str = "1.0.0"
    environment: str = "development"  # development|production|test

    storage: StorageSettings = Field(default_factory=StorageSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = ['development', 'production', 'test']
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v

    @property
    def subdirectories(self) -> Dict[ResourceKind, str]:
        return {
            ResourceKind.JSON: self.storage.json_subdir,
            ResourceKind.TEXT: self.storage.text_subdir,
        }

    @property
    def log_dir(self) -> Path:
        return self.storage.data_dir / self.monitoring.log_subdir


# =============================================================================
# Settings Loader
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Load and return application settings (cached).

    Returns:
        Settings: Complete application settings
    """
    settings_dict: Dict[str, Any] = load_toml_config(os.getenv("CONFIG_SERVER_CONFIG_FILE"))

    if environment := os.getenv("CONFIG_SERVER_ENVIRONMENT"):
        settings_dict["environment"] = environment

    if data_dir := os.getenv("DATA_DIR"):
        settings_dict.setdefault("storage", {})["data_dir"] = data_dir

    if log_level := os.getenv("LOG_LEVEL"):
        settings_dict.setdefault("monitoring", {})["log_level"] = log_level

    if log_format := os.getenv("CONFIG_SERVER_LOG_FORMAT"):
        settings_dict.setdefault("monitoring", {})["log_format"] = log_format

    if host := os.getenv("CONFIG_SERVER_HOST"):
        settings_dict.setdefault("server", {})["bind_host"] = host

    if port := os.getenv("CONFIG_SERVER_PORT"):
        settings_dict.setdefault("server", {})["bind_port"] = port

    return Settings(**settings_dict)


def reload_settings() -> Settings:
    """
    Reload settings (clears cache).

    Returns:
        Settings: Reloaded application settings
    """
    get_settings.cache_clear()
    return get_settings()


# =============================================================================
# Directory Bootstrap
# =============================================================================

def prepare_directories(settings: Settings) -> None:
    """
    Create the resource and log subdirectories under the data directory.

    The data directory itself must already exist (it is usually a mounted
    volume); it is never created here.

    Raises:
        FileNotFoundError: If the data directory does not exist
    """
    data_dir = settings.storage.data_dir
    if not data_dir.is_dir():
        raise FileNotFoundError(f"Directory {data_dir} does not exist or is not accessible")

    for subdir in (*settings.subdirectories.values(), settings.monitoring.log_subdir):
        (data_dir / subdir).mkdir(parents=True, exist_ok=True)
