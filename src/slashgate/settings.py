from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import TomlConfigSettingsSource

from .config import ConfigError, read_config, resolve_config_path

DEFAULT_SUPPORT_URL = "https://discord.gg/support"


class SlashgateSettings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="forbid",
        env_prefix="SLASHGATE__",
        env_nested_delimiter="__",
    )

    token: SecretStr | None = None
    guild_id: int | None = None
    owners: list[int] = Field(default_factory=list)
    modules_dir: Path = Path("modules")
    support_url: str = DEFAULT_SUPPORT_URL

    @field_validator("guild_id", mode="before")
    @classmethod
    def _validate_guild_id(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValueError("guild_id must be an integer")
        return value

    @field_validator("owners", mode="before")
    @classmethod
    def _validate_owners(cls, value: Any) -> Any:
        if isinstance(value, (str, int)):
            value = [value]
        if not isinstance(value, list):
            raise ValueError("owners must be a list of user ids")
        return value

    @field_validator("support_url", mode="before")
    @classmethod
    def _validate_support_url(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("support_url must be a non-empty string")
        return value.strip()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def resolved_modules_dir(self, *, config_path: Path) -> Path:
        path = self.modules_dir.expanduser()
        if not path.is_absolute():
            path = config_path.parent / path
        return path


def load_settings(path: str | Path | None = None) -> tuple[SlashgateSettings, Path]:
    cfg_path = resolve_config_path(path)
    # Surface missing files and TOML syntax errors with our own messages.
    read_config(cfg_path)
    return _load_settings_from_path(cfg_path), cfg_path


def require_token(settings: SlashgateSettings, config_path: Path) -> str:
    token = settings.token
    if token is None or not token.get_secret_value().strip():
        raise ConfigError(f"Missing bot token in {config_path}.")
    return token.get_secret_value().strip()


def _load_settings_from_path(cfg_path: Path) -> SlashgateSettings:
    cfg = dict(SlashgateSettings.model_config)
    cfg["toml_file"] = cfg_path
    Bound = type(
        "SlashgateSettingsBound",
        (SlashgateSettings,),
        {"model_config": SettingsConfigDict(**cfg)},
    )
    try:
        return Bound()
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {cfg_path}: {exc}") from exc
