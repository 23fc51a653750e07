# src/amlguard/config.py
"""
Settings for the bot process.

Values come from a YAML file (``config/config.yml`` by default) in which
``${VAR}`` tokens are replaced from the process environment before parsing.
When no file is present, ``default_settings()`` builds the same structure
from environment variables alone.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from amlguard.domain.errors import ConfigError

DEFAULT_CONFIG_PATH = "config/config.yml"
DEFAULT_AML_BASE_URL = "https://api.aml-provider.com"

_ENV_TOKEN = re.compile(r"\$\{([^}]+)\}")


class TelegramSettings(BaseModel):
    token: str = ""


class AMLSettings(BaseModel):
    api_key: str = ""
    base_url: str = DEFAULT_AML_BASE_URL
    timeout: float = Field(default=10.0, gt=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    file: str = "bot.log"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=0, le=65535)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AMLGUARD_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    aml: AMLSettings = Field(default_factory=AMLSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    def require_credentials(self) -> None:
        """Raises ConfigError unless both the bot token and the AML API key are set."""
        if not self.telegram.token:
            raise ConfigError("TELEGRAM_BOT_TOKEN is required but not set")
        if not self.aml.api_key:
            raise ConfigError("AML_API_KEY is required but not set")


def expand_env(text: str) -> str:
    """Replaces every ``${VAR}`` token with the value of VAR, or '' when unset."""
    return _ENV_TOKEN.sub(lambda m: os.getenv(m.group(1).strip(), ""), text)


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Settings:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    try:
        data: Any = yaml.safe_load(expand_env(raw))
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping at the top level")

    try:
        return Settings(**_normalize_sections(data))
    except ValidationError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e


def default_settings() -> Settings:
    """Settings built from TELEGRAM_BOT_TOKEN / AML_API_KEY with built-in defaults."""
    return Settings(
        telegram=TelegramSettings(token=os.getenv("TELEGRAM_BOT_TOKEN", "")),
        aml=AMLSettings(api_key=os.getenv("AML_API_KEY", "")),
    )


def resolve_settings(path: Union[str, Path, None] = None) -> Tuple[Settings, Optional[Path]]:
    """
    Loads the config file when it exists, otherwise falls back to environment
    defaults. Returns the settings and the file they came from (None for the
    fallback) so the caller can report it once logging is configured.
    """
    path = Path(path or os.getenv("AMLGUARD_CONFIG") or DEFAULT_CONFIG_PATH)
    if path.exists():
        return load_config(path), path
    return default_settings(), None


def _normalize_sections(data: Dict[str, Any]) -> Dict[str, Any]:
    # A section written as ``server:`` with no body parses to None and keeps its
    # defaults; a value left blank by an unset ${VAR} parses to None and is ''.
    sections = {}
    for name, section in data.items():
        if section is None:
            continue
        if isinstance(section, dict):
            section = {k: ("" if v is None else v) for k, v in section.items()}
        sections[name] = section
    return sections
