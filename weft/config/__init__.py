from .agent import AgentConfig
from .models import (
    DEFAULT_CONFIG_PATHS,
    HooksConfig,
    LoggingConfig,
    WeftConfig,
    build_hook_manager,
    find_config,
    load_config,
    load_config_with_defaults,
    setup_logging,
)

__all__ = [
    "AgentConfig",
    "WeftConfig", "HooksConfig", "LoggingConfig", "DEFAULT_CONFIG_PATHS",
    "load_config", "load_config_with_defaults", "find_config", "build_hook_manager",
    "setup_logging",
]
