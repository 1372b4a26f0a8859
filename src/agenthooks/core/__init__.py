"""Runtime configuration for agenthooks."""

from agenthooks.core.config import load_dispatcher_config, load_env_config, load_toml_config

__all__ = ["load_dispatcher_config", "load_env_config", "load_toml_config"]
