"""Configuration: defaults, then config.yaml, then TERMCHAT_* environment variables."""

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"

ENV_PREFIX = "TERMCHAT_"


class ConfigError(ValueError):
    """Raised when a configuration value is missing its expected shape."""


@dataclass(frozen=True)
class ChatConfig:
    api_url: str = "http://localhost:11434/v1/completions"
    model: str = "llama3.2"
    max_history: int = 5          # exchange pairs, so twice as many lines
    max_tokens: int = 500
    temperature: float = 0.7
    stop: list[str] = field(default_factory=lambda: ["User:", "Assistant:"])
    request_timeout: float | None = None
    log_level: str = "WARNING"
    log_file: str | None = None


def _read_yaml(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _parse_stop(raw: str) -> list[str]:
    raw = raw.strip()
    if raw.startswith("["):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{ENV_PREFIX}STOP is not a valid JSON list: {e}") from e
    return [token.strip() for token in raw.split(",") if token.strip()]


def _parse_timeout(raw: str) -> float | None:
    if raw.strip().lower() in ("", "none", "null"):
        return None
    return float(raw)


_ENV_FIELDS = {
    "API_URL": ("api_url", str),
    "MODEL": ("model", str),
    "MAX_HISTORY": ("max_history", int),
    "MAX_TOKENS": ("max_tokens", int),
    "TEMPERATURE": ("temperature", float),
    "STOP": ("stop", _parse_stop),
    "TIMEOUT": ("request_timeout", _parse_timeout),
    "LOG_LEVEL": ("log_level", str),
    "LOG_FILE": ("log_file", str),
}


def _from_file(data: dict) -> dict:
    chat_cfg = data.get("chat", {}) or {}
    log_cfg = data.get("logging", {}) or {}
    if not isinstance(chat_cfg, dict) or not isinstance(log_cfg, dict):
        raise ConfigError("'chat' and 'logging' sections must be mappings")
    values = {}
    for key in ("api_url", "model", "max_history", "max_tokens", "temperature", "stop", "request_timeout"):
        if key in chat_cfg:
            values[key] = chat_cfg[key]
    if "level" in log_cfg:
        values["log_level"] = log_cfg["level"]
    if "file" in log_cfg:
        values["log_file"] = log_cfg["file"]
    return values


def _from_env(environ) -> dict:
    values = {}
    for suffix, (key, convert) in _ENV_FIELDS.items():
        raw = environ.get(ENV_PREFIX + suffix)
        if raw is None:
            continue
        try:
            values[key] = convert(raw)
        except ValueError as e:
            raise ConfigError(f"{ENV_PREFIX}{suffix}={raw!r}: {e}") from e
    return values


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate(config: ChatConfig) -> ChatConfig:
    if not _is_int(config.max_history) or config.max_history < 1:
        raise ConfigError("max_history must be a positive integer")
    if not _is_int(config.max_tokens) or config.max_tokens < 1:
        raise ConfigError("max_tokens must be a positive integer")
    if not _is_number(config.temperature) or not 0 <= config.temperature <= 2:
        raise ConfigError("temperature must be a number between 0 and 2")
    if not isinstance(config.stop, list) or not all(isinstance(s, str) for s in config.stop):
        raise ConfigError("stop must be a list of strings")
    if config.request_timeout is not None:
        if not _is_number(config.request_timeout) or config.request_timeout <= 0:
            raise ConfigError("request_timeout must be a positive number when set")
    if not isinstance(config.api_url, str) or not config.api_url:
        raise ConfigError("api_url must be a non-empty string")
    if not isinstance(config.model, str) or not config.model:
        raise ConfigError("model must be a non-empty string")
    if not isinstance(config.log_level, str):
        raise ConfigError("log_level must be a string such as WARNING")
    if config.log_file is not None and not isinstance(config.log_file, str):
        raise ConfigError("log_file must be a path")
    return config


def load_config(config_path: str | None = None, environ=None) -> ChatConfig:
    """Build the effective configuration.

    The file is taken from `config_path`, else $TERMCHAT_CONFIG, else
    ./config.yaml. A missing default file is fine; a missing explicit file is not.
    """
    environ = os.environ if environ is None else environ
    explicit = config_path or environ.get(ENV_PREFIX + "CONFIG")
    path = Path(explicit or DEFAULT_CONFIG_PATH)

    values = {}
    if path.exists():
        values.update(_from_file(_read_yaml(path)))
        logger.debug("Loaded config file %s", path)
    elif explicit:
        raise ConfigError(f"Config file not found: {path}")

    values.update(_from_env(environ))
    config = replace(ChatConfig(), **values)
    return validate(config)
