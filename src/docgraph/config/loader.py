"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (DOCGRAPH__SECTION__KEY)
3. Repo config (.docgraph/config.yaml or docgraph.yaml)
4. Global config (~/.config/docgraph/config.yaml)
5. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from docgraph.config.models import (
    ConverterConfig,
    DocGraphConfig,
    LoggingConfig,
    SerializerConfig,
)
from docgraph.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/docgraph/config.yaml").expanduser()

REPO_CONFIG_NAMES = (Path(".docgraph") / "config.yaml", Path("docgraph.yaml"))


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(loaded, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return loaded


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class DocGraphSettings(BaseSettings):
        """Root config. Env vars: DOCGRAPH__LOGGING__LEVEL, DOCGRAPH__CONVERTER__NAME, etc."""

        model_config = SettingsConfigDict(
            env_prefix="DOCGRAPH__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        converter: ConverterConfig = ConverterConfig()
        serializer: SerializerConfig = SerializerConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return DocGraphSettings


DocGraphSettings = _make_settings_class({})


def find_repo_config(repo_root: Path) -> Path | None:
    """Return the first repo-level config file that exists, if any."""
    for name in REPO_CONFIG_NAMES:
        candidate = repo_root / name
        if candidate.exists():
            return candidate
    return None


def load_config(
    repo_root: Path | None = None,
    config_file: Path | None = None,
    **kwargs: Any,
) -> DocGraphConfig:
    """Load config: defaults < global yaml < repo yaml < env vars < kwargs.

    Args:
        repo_root: Directory searched for .docgraph/config.yaml or docgraph.yaml.
                   Defaults to current working directory.
        config_file: Explicit config file, replacing the repo lookup.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On a missing explicit file, invalid YAML syntax or validation errors.
    """
    repo_root = repo_root or Path.cwd()

    if config_file is not None:
        if not config_file.exists():
            raise ConfigError.file_not_found(str(config_file))
        repo_path: Path | None = config_file
    else:
        repo_path = find_repo_config(repo_root)

    yaml_config = _load_yaml(repo_path) if repo_path else {}

    global_config = _load_yaml(GLOBAL_CONFIG_PATH)
    if global_config:
        yaml_config = _deep_merge(global_config, yaml_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
        return DocGraphConfig.model_validate(settings.model_dump())
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
