"""Application configuration."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from table_engine.core.exceptions import ConfigurationError, wrap_exception
from table_engine.models import RestaurantConfig


class EngineSettings(BaseModel):
    """Availability engine behaviour."""

    # Count Pending bookings as holding their tables/seats.
    # Off: staff pick among competing holds (confirmation rejects the loser).
    # On: the first hold blocks later requests until it is declined.
    pending_holds_capacity: bool = False

    # Refuse requests on closed days or at times that are not bookable slots
    enforce_service_hours: bool = True

    # Days searched when suggesting the next open date
    next_open_horizon_days: int = Field(default=14, ge=1)


class Settings(BaseSettings):
    """Application settings.

    Loaded from:
    1. Environment variables (TABLE_ENGINE_*)
    2. configs/{environment}.yaml
    3. configs/default.yaml
    """

    model_config = SettingsConfigDict(
        env_prefix="TABLE_ENGINE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Environment
    environment: str = "development"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Subsystems
    engine: EngineSettings = Field(default_factory=EngineSettings)
    restaurant: RestaurantConfig = Field(default_factory=RestaurantConfig)


def load_restaurant_config(data: Mapping[str, Any]) -> RestaurantConfig:
    """Validate a restaurant configuration mapping.

    Args:
        data: Raw configuration (e.g. parsed YAML or a saved settings document)

    Returns:
        Validated, immutable restaurant configuration

    Raises:
        ConfigurationError: If any table, rule, window or schedule entry is invalid
    """
    try:
        return RestaurantConfig.model_validate(_plain(data))
    except ValidationError as e:
        raise wrap_exception(
            e, ConfigurationError, "Invalid restaurant configuration",
            errors=_error_list(e),
        ) from e


@lru_cache
def get_settings(config_dir: str = "configs") -> Settings:
    """Get cached application settings.

    Returns:
        Settings object loaded from config files and environment.

    Raises:
        ConfigurationError: If the merged configuration is invalid
    """
    import os
    from dynaconf import Dynaconf

    # Determine paths
    config_path = Path(config_dir)
    env = os.getenv("TABLE_ENGINE_ENV", "development")

    # Build settings file list
    settings_files = []
    if (config_path / "default.yaml").exists():
        settings_files.append(str(config_path / "default.yaml"))
    if (config_path / f"{env}.yaml").exists():
        settings_files.append(str(config_path / f"{env}.yaml"))

    # Load with Dynaconf
    dynaconf = Dynaconf(
        envvar_prefix="TABLE_ENGINE",
        settings_files=settings_files,
        environments=False,
        load_dotenv=True,
    )

    # Convert to dict
    config_dict: dict[str, Any] = {}
    for key in dynaconf.keys():
        if not key.startswith("_"):
            config_dict[key.lower()] = _plain(dynaconf[key])

    # Add environment
    config_dict["environment"] = env

    try:
        return Settings(**config_dict)
    except ValidationError as e:
        raise wrap_exception(
            e, ConfigurationError, "Invalid application configuration",
            errors=_error_list(e), files=settings_files,
        ) from e


def _plain(value: Any) -> Any:
    """Convert Dynaconf boxes into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _error_list(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in exc.errors()
    ]
