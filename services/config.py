import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from models.config import DEFAULT_EXCLUSION_TAG, Config, RadarrConfig, SonarrConfig
from services.exceptions import ConfigurationError

TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off")


class ConfigManager:
    def __init__(self, config_path: str = "config.yaml", load_env: bool = True):
        self.config_path = Path(config_path)

        # Load .env
        if load_env:
            load_dotenv()

        # Load config.yaml
        self.config = self._load_config()

    def _read_file(self) -> dict:
        """Read config.yaml if it exists. Every setting can come from the environment instead."""
        if not self.config_path.exists():
            return {}

        with open(self.config_path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Could not parse {self.config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.config_path} must contain a mapping at the top level")
        return data

    def _load_config(self) -> Config:
        """
        Load and parse configuration from config.yaml and environment variables.

        Environment variables take precedence over config file values and follow
        the pattern SERVICE_FIELD (e.g. RADARR_BASE_URI, SONARR_API_KEY). Global
        settings use their bare name (DRY_RUN, MAX_AGE_DAYS, REQUEST_TIMEOUT,
        VERIFY_SSL).

        Returns:
            Config: An immutable Config object

        Raises:
            ConfigurationError: If a required value is missing or a value is invalid
        """
        data = self._read_file()

        fields = {
            "radarr": ["base_uri", "api_key", "exclusion_tag_name"],
            "sonarr": ["base_uri", "api_key", "exclusion_tag_name"],
        }
        for key in fields.keys():
            if data.get(key) is None:
                data[key] = {}
            elif not isinstance(data[key], dict):
                raise ConfigurationError(f"'{key}' in {self.config_path} must be a mapping")

            for field in fields[key]:
                if var := _env(f"{key.upper()}_{field.upper()}"):
                    data[key][field] = var

        for field in ("dry_run", "max_age_days", "request_timeout", "verify_ssl"):
            if var := _env(field.upper()):
                data[field] = var

        request_timeout = _parse_int(data.get("request_timeout"), "REQUEST_TIMEOUT", 30)
        if request_timeout <= 0:
            raise ConfigurationError("REQUEST_TIMEOUT must be a positive number of seconds")
        verify_ssl = _parse_bool(data.get("verify_ssl"), "VERIFY_SSL", True)

        max_age_days = _parse_int(data.get("max_age_days"), "MAX_AGE_DAYS", 90)
        if max_age_days < 0:
            raise ConfigurationError("MAX_AGE_DAYS cannot be negative")

        return Config(
            radarr=RadarrConfig(
                base_uri=_required(data["radarr"], "radarr", "base_uri"),
                api_key=_required(data["radarr"], "radarr", "api_key"),
                exclusion_tag_name=_optional(
                    data["radarr"].get("exclusion_tag_name"), DEFAULT_EXCLUSION_TAG
                ),
                request_timeout=request_timeout,
                verify_ssl=verify_ssl,
            ),
            sonarr=SonarrConfig(
                base_uri=_required(data["sonarr"], "sonarr", "base_uri"),
                api_key=_required(data["sonarr"], "sonarr", "api_key"),
                exclusion_tag_name=_optional(
                    data["sonarr"].get("exclusion_tag_name"), DEFAULT_EXCLUSION_TAG
                ),
                request_timeout=request_timeout,
                verify_ssl=verify_ssl,
            ),
            dry_run=_parse_bool(data.get("dry_run"), "DRY_RUN", True),
            max_age_days=max_age_days,
        )


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _required(section: dict, service: str, field: str) -> str:
    value = section.get(field)
    if _is_blank(value):
        raise ConfigurationError(
            f"Missing required setting: '{service.upper()}_{field.upper()}' "
            f"(or '{service}.{field}' in config.yaml)"
        )
    return str(value).strip()


def _optional(value: Any, default: str) -> str:
    return default if _is_blank(value) else str(value).strip()


def _parse_bool(value: Any, name: str, default: bool) -> bool:
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        return value

    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean (true/false), got {value!r}")


def _parse_int(value: Any, name: str, default: int) -> int:
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")

    try:
        return int(str(value).strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e
