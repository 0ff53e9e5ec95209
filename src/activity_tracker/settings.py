"""Application settings and configuration management."""

from pathlib import Path

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import ClassifierConfig, SensorKind


class Settings(BaseSettings):
    """
    Application settings for Activity Tracker.

    Settings are loaded in the following order of precedence (highest to lowest):
    1. Values passed explicitly (e.g. from a YAML config file)
    2. Environment variables (e.g., ACTIVITY_TRACKER_CLASSIFIER__MOVING_AVERAGE_WINDOW)
    3. .env file (if found)
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="ACTIVITY_TRACKER_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    # --- Classification ---
    classifier: ClassifierConfig = ClassifierConfig()

    # Which stream's ticks produce records. On acceleration ticks the latest
    # fix is reused; on location ticks the latest acceleration sample is reused.
    classification_trigger: SensorKind = SensorKind.ACCELERATION

    # --- Output ---
    output_dir: Path = Path("routes")


def load_settings(config_file: Path | None = None) -> Settings:
    """Load settings from a YAML file, environment variables, and defaults."""
    if config_file:
        try:
            with open(config_file, encoding="utf-8") as f:
                yaml_settings = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to read config file {config_file}: {e}"
            ) from e

        if not isinstance(yaml_settings, dict):
            raise ConfigurationError(
                f"Config file {config_file} must contain a mapping at top level"
            )

        # Relative output paths are anchored at the config file's directory
        if (
            "output_dir" in yaml_settings
            and not Path(yaml_settings["output_dir"]).is_absolute()
        ):
            yaml_settings["output_dir"] = str(
                config_file.parent / yaml_settings["output_dir"]
            )

        return Settings(**yaml_settings)

    return Settings()
