"""Configuration loading and binding for envwire.

Example:
    from envwire.config import EnvBinder, EnvLoader, EnvironmentContext

    reader = EnvLoader().add_env_files("config.env").load()

    reader = EnvLoader().load_env(EnvironmentContext.from_env(base_path="env"))
    settings = EnvBinder(reader).bind(AppSettings)
"""

from envwire.config.binder import (
    ENV_KEY_METADATA,
    EnvBinder,
    coerce_value,
    env_field,
    to_env_key,
)
from envwire.config.env_loader import EnvLoader, parse_env_text
from envwire.config.environment import (
    DEFAULT_ENV_FILE,
    DEFAULT_ENVIRONMENT,
    EnvFileSpec,
    EnvironmentContext,
)
from envwire.config.reader import EnvReader, parse_bool

__all__ = [
    # Loading
    "EnvLoader",
    "parse_env_text",
    "EnvReader",
    "parse_bool",
    # Convention resolution
    "EnvFileSpec",
    "EnvironmentContext",
    "DEFAULT_ENV_FILE",
    "DEFAULT_ENVIRONMENT",
    # Binding
    "EnvBinder",
    "env_field",
    "to_env_key",
    "coerce_value",
    "ENV_KEY_METADATA",
]
