"""envwire - .env loading, settings binding and singleton registration.

This package provides:
- config: EnvLoader, EnvReader, EnvBinder and convention-based file resolution
- registration: ServiceCollection and the add_dotenv / add_custom_env entry points
- exceptions: ConfigurationError, ParseError and BindingError
- logger: Structured logging with optional JSON output
- web: FastAPI dependency provider (import envwire.web explicitly)
"""

__version__ = "1.0.0"

from envwire.logger import (
    Logger,
    StructuredLogger,
    create_logger,
    get_logger,
)

from envwire.config import (
    EnvBinder,
    EnvFileSpec,
    EnvironmentContext,
    EnvLoader,
    EnvReader,
    env_field,
    to_env_key,
)

from envwire.registration import (
    ServiceCollection,
    add_custom_env,
    add_custom_env_settings,
    add_dotenv,
    add_dotenv_settings,
)

from envwire.exceptions import (
    BindingError,
    ConfigurationError,
    EnvwireError,
    ParseError,
)

__all__ = [
    "__version__",
    # Logger
    "Logger",
    "StructuredLogger",
    "get_logger",
    "create_logger",
    # Config
    "EnvLoader",
    "EnvReader",
    "EnvBinder",
    "EnvFileSpec",
    "EnvironmentContext",
    "env_field",
    "to_env_key",
    # Registration
    "ServiceCollection",
    "add_dotenv",
    "add_dotenv_settings",
    "add_custom_env",
    "add_custom_env_settings",
    # Exceptions
    "EnvwireError",
    "ConfigurationError",
    "ParseError",
    "BindingError",
]
