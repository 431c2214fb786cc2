"""Exceptions raised by envwire.

All exceptions include structured error information (code, message,
details) and share the ``EnvwireError`` base, so a bootstrap routine can
fail fast on any of them:

    from envwire.exceptions import EnvwireError

    try:
        settings = add_custom_env_settings(services, AppSettings, base_path="env")
    except EnvwireError as exc:
        raise SystemExit(str(exc))
"""

from envwire.exceptions.base import (
    BindingError,
    ConfigurationError,
    EnvwireError,
    ParseError,
)

__all__ = [
    "EnvwireError",
    "ConfigurationError",
    "ParseError",
    "BindingError",
]
