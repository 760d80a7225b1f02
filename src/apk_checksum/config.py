"""Configuration loader with multi-source support.

Configuration only controls diagnostics (logging). The checksum itself never
depends on it, so a broken system file, user file or environment override is
reported and ignored. Only an explicitly requested file is fatal.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple

import platformdirs
import toml
from pydantic import BaseModel, Field, ConfigDict, ValidationError

from .errors import ConfigurationError
from .logging_config import LoggingConfig

APP_NAME = "apk-checksum"

logger = logging.getLogger(__name__)


class ChecksumToolConfig(BaseModel):
    """Root configuration for the apk-checksum tool."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigLoader:
    """Loads configuration from multiple sources with priority.

    Sources, lowest priority first: system config, user config, explicit
    config file, environment variables (``APK_CHECKSUM_SECTION_KEY``).
    Each source is merged only if the result still validates.
    """

    def __init__(self, app_name: str = APP_NAME) -> None:
        self.app_name = app_name

    def load(self, config_path: Optional[Path] = None) -> ChecksumToolConfig:
        """Load configuration from all sources.

        Args:
            config_path: Optional explicit TOML file; must exist if given

        Returns:
            Validated configuration object

        Raises:
            ConfigurationError: If the explicit file is missing, cannot be
                parsed, or holds invalid values
        """
        config_dict: Dict[str, Any] = {}

        for source in (self._system_config_path(), self._user_config_path()):
            if not source.exists():
                continue
            logger.debug(f"Loading config from {source}")
            try:
                layer = self._read_toml(source)
            except ConfigurationError as e:
                logger.warning(f"Ignoring config file: {e.message}")
                continue
            config_dict = self._merge_if_valid(config_dict, layer, str(source))

        if config_path is not None:
            if not config_path.exists():
                raise ConfigurationError(
                    f"Config file not found: {config_path}",
                    path=str(config_path)
                )
            merged = self._deep_merge(config_dict, self._read_toml(config_path))
            self._validate(merged, str(config_path))
            config_dict = merged

        for env_key, layer in self._env_overrides():
            config_dict = self._merge_if_valid(config_dict, layer, env_key)

        return ChecksumToolConfig(**config_dict)

    def _system_config_path(self) -> Path:
        """Path of the system-wide configuration file."""
        if os.name == "nt":
            return (
                Path(os.environ.get("PROGRAMDATA", "C:\\ProgramData"))
                / self.app_name
                / "config.toml"
            )
        return Path(f"/etc/{self.app_name}/config.toml")

    def _user_config_path(self) -> Path:
        """Path of the user-specific configuration file."""
        user_config_dir = platformdirs.user_config_dir(appname=self.app_name, appauthor=False)
        return Path(user_config_dir) / "config.toml"

    def _read_toml(self, path: Path) -> Dict[str, Any]:
        try:
            return toml.load(path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}", path=str(path)) from e

    def _validate(self, config_dict: Dict[str, Any], source: str) -> None:
        try:
            ChecksumToolConfig(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {source}: {e}",
                source=source
            ) from e

    def _merge_if_valid(
        self, base: Dict[str, Any], layer: Dict[str, Any], source: str
    ) -> Dict[str, Any]:
        """Merge an implicit source, or keep ``base`` if the result is invalid."""
        merged = self._deep_merge(base, layer)
        try:
            self._validate(merged, source)
        except ConfigurationError as e:
            logger.warning(f"Ignoring configuration from {source}: {e.__cause__}")
            return base
        return merged

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _env_overrides(self) -> List[Tuple[str, Dict[str, Any]]]:
        """One nested override per matching environment variable.

        APK_CHECKSUM_LOGGING_LEVEL=debug -> {"logging": {"level": "debug"}}.
        Values stay strings; the schema does the coercion.
        """
        prefix = f"{self.app_name.upper().replace('-', '_')}_"
        overrides = []

        for env_key, env_value in sorted(os.environ.items()):
            if not env_key.startswith(prefix):
                continue

            *sections, key = env_key[len(prefix):].lower().split("_", 1)
            layer: Dict[str, Any] = {key: env_value}
            for section in reversed(sections):
                layer = {section: layer}
            overrides.append((env_key, layer))

        return overrides
