"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from ..errors import ConfigurationError
from .credentials import AgentSettings, Credentials, load_credentials
from .defaults import DefaultConfig, get_default_config
from .validation import ConfigValidator, ValidationError

SETTINGS_FILE = "settings.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Load overrides from the settings file, if present."""
        settings_file = self.config_dir / SETTINGS_FILE

        if not settings_file.exists():
            return {}

        with open(settings_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{settings_file} must contain a mapping at the top level",
                context={"path": str(settings_file)}
            )
        return file_config

    def merge_config(
        self,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Settings file overrides
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_overrides())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_settings(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        require_credentials: bool = True
    ) -> AgentSettings:
        """
        Resolve, validate and freeze the settings for one agent process.

        Raises:
            ConfigurationError: If any parameter or credential is invalid
        """
        config = self.merge_config(overrides)
        credentials = load_credentials(environ)

        errors = self._unknown_keys(config)
        errors.extend(ConfigValidator.validate_config(config))
        if require_credentials:
            errors.extend(ConfigValidator.validate_credentials(credentials))

        if errors:
            details = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            raise ConfigurationError(
                "Invalid configuration: " + "; ".join(details),
                errors=errors
            )

        return self._build_settings(config, credentials)

    def _build_settings(self, config: dict[str, Any], credentials: Credentials) -> AgentSettings:
        sections = {}
        for section in fields(self.defaults):
            section_type = type(getattr(self.defaults, section.name))
            sections[section.name] = section_type(**config[section.name])
        return AgentSettings(credentials=credentials, **sections)

    def _unknown_keys(self, config: dict[str, Any]) -> list[ValidationError]:
        """Report keys that have no matching default parameter."""
        errors = []
        known_sections = {section.name: getattr(self.defaults, section.name)
                          for section in fields(self.defaults)}

        for section_name, params in config.items():
            if section_name not in known_sections:
                errors.append(ValidationError(
                    field=section_name,
                    message="Unknown configuration section",
                    value=params
                ))
                continue
            if not isinstance(params, dict):
                continue
            known_params = {f.name for f in fields(known_sections[section_name])}
            for key in params:
                if key not in known_params:
                    errors.append(ValidationError(
                        field=f"{section_name}.{key}",
                        message="Unknown configuration parameter",
                        value=params[key]
                    ))

        return errors

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, dict):
                    result[field_name] = dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
