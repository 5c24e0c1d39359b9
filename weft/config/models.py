"""Application configuration loaded from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigError
from ..hooks import BashConfirmHandler, HookManager, ToolConfirmHandler
from ..infra.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATHS = (
    "./weft.yaml",
    "./configs/weft.yaml",
    "~/.config/weft/weft.yaml",
    "/etc/weft/weft.yaml",
)


class HooksConfig(BaseModel):
    bash_confirm: bool = Field(False, description="Ask before every bash command")
    tool_confirm: list[str] = Field(
        default_factory=list, description="Tools that need confirmation ('*' for all)"
    )


class LoggingConfig(BaseModel):
    level: str = Field("INFO", description="Log level name")
    json_format: bool = Field(False, description="Render logs as JSON lines")


class WeftConfig(BaseModel):
    hooks: HooksConfig = Field(default_factory=HooksConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path) -> WeftConfig:
    path = Path(path).expanduser()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}", e) from e

    try:
        data: Any = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}", e) from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    try:
        return WeftConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config file {path}: {e}", e) from e


def find_config(paths: tuple[str, ...] = DEFAULT_CONFIG_PATHS) -> Path | None:
    for candidate in paths:
        path = Path(candidate).expanduser()
        if path.is_file():
            return path
    return None


def load_config_with_defaults(paths: tuple[str, ...] = DEFAULT_CONFIG_PATHS) -> WeftConfig:
    """Load the first config found on the search path, else the defaults."""
    path = find_config(paths)
    if path is None:
        return WeftConfig()
    logger.debug("config_loaded", path=str(path))
    return load_config(path)


def build_hook_manager(config: WeftConfig, **handler_kwargs: Any) -> HookManager:
    """Register the confirmation handlers ``config.hooks`` enables.

    ``handler_kwargs`` (console, reader) are passed to each handler.
    """
    manager = HookManager()
    if config.hooks.bash_confirm:
        manager.register(BashConfirmHandler(**handler_kwargs))
    if config.hooks.tool_confirm:
        names = [n for n in config.hooks.tool_confirm if n != "*"]
        manager.register(ToolConfirmHandler(names, **handler_kwargs))
    return manager


def setup_logging(config: WeftConfig) -> None:
    configure_logging(config.logging.level, config.logging.json_format)
