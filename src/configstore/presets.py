"""Environment presets used by StoreFactory.create_for_environment."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from configstore.exceptions import UnsupportedEnvironmentError
from configstore.values import Value


class EnvironmentPreset(BaseModel):
    """Baseline settings for one deployment environment."""

    model_config = ConfigDict(frozen=True)

    db_host: str = Field(description="Database host name")
    db_port: int = Field(default=5432, ge=1, le=65535, description="Database port")
    api_endpoint: str = Field(description="Base URL of the backing API")
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info", description="Application log level"
    )
    feature_x_enabled: bool = Field(default=False, description="Toggle for feature X")

    def as_values(self) -> dict[str, Value]:
        """Preset fields as store key/value pairs, in field order."""
        return self.model_dump(mode="json")


ENVIRONMENT_PRESETS: dict[str, EnvironmentPreset] = {
    "development": EnvironmentPreset(
        db_host="localhost",
        db_port=5432,
        api_endpoint="https://dev.api.example.com",
        log_level="debug",
        feature_x_enabled=True,
    ),
    "production": EnvironmentPreset(
        db_host="prod.db.server",
        db_port=5432,
        api_endpoint="https://api.example.com",
        log_level="error",
        feature_x_enabled=False,
    ),
    "testing": EnvironmentPreset(
        db_host="test.db.server",
        db_port=5432,
        api_endpoint="https://test.api.example.com",
        log_level="info",
        feature_x_enabled=True,
    ),
}


def get_preset(environment: str) -> EnvironmentPreset:
    """
    Look up a preset by environment name (exact, case-sensitive).

    Raises:
        UnsupportedEnvironmentError: If no preset has that name
    """
    try:
        return ENVIRONMENT_PRESETS[environment]
    except KeyError:
        raise UnsupportedEnvironmentError(environment, ENVIRONMENT_PRESETS) from None
