"""Register loaded env readers and bound settings as singletons.

A ``ServiceCollection`` is a plain type -> instance map owned by the
application's bootstrap code. The ``add_*`` functions load (and bind) once
and store the result, so consumers receive it explicitly instead of
reaching for global state.

Example:
    services = ServiceCollection()
    settings = add_custom_env_settings(
        services, AppSettings, base_path="env_files/environment/production",
        environment_name="production",
    )
    assert services.get_required(AppSettings) is settings
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Type, TypeVar, Union

from envwire.config import EnvBinder, EnvironmentContext, EnvLoader, EnvReader
from envwire.config.environment import DEFAULT_ENV_FILE
from envwire.exceptions import ConfigurationError

T = TypeVar("T")

PathLike = Union[str, Path]


class ServiceCollection:
    """Singletons keyed by their service type."""

    def __init__(self) -> None:
        self._services: Dict[type, Any] = {}

    def add_singleton(self, service_type: Type[T], instance: T) -> T:
        """Register ``instance`` for ``service_type``, replacing any previous one."""
        if instance is None:
            raise ConfigurationError(
                "NULL_SERVICE",
                f"Cannot register None for {service_type.__name__}",
            )
        self._services[service_type] = instance
        return instance

    def get(self, service_type: Type[T]) -> Optional[T]:
        return self._services.get(service_type)

    def get_required(self, service_type: Type[T]) -> T:
        """Return the registered instance.

        Raises:
            ConfigurationError: If nothing is registered for service_type
        """
        if service_type not in self._services:
            raise ConfigurationError(
                "SERVICE_NOT_REGISTERED",
                f"No service registered for {service_type.__name__}",
                {"service_type": service_type.__name__},
            )
        return self._services[service_type]

    def __contains__(self, service_type: object) -> bool:
        return service_type in self._services

    def __iter__(self) -> Iterator[type]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)


def _require_services(services: Optional[ServiceCollection]) -> ServiceCollection:
    if services is None:
        raise ConfigurationError("NULL_SERVICES", "services must not be None")
    return services


def _require_settings_type(settings_type: Optional[type]) -> type:
    if settings_type is None:
        raise ConfigurationError("NULL_SETTINGS_TYPE", "settings_type must not be None")
    return settings_type


def _load_paths(paths: tuple) -> EnvReader:
    return EnvLoader().add_env_files(*(paths or (DEFAULT_ENV_FILE,))).load()


def _load_custom(
    base_path: Optional[PathLike],
    environment_name: Optional[str],
    context: Optional[EnvironmentContext],
) -> EnvReader:
    loader = EnvLoader()
    if base_path is not None:
        loader.set_base_path(base_path)
    if environment_name is not None:
        loader.set_environment_name(environment_name)
    return loader.load_env(context)


def add_dotenv(services: ServiceCollection, *paths: PathLike) -> EnvReader:
    """Load ``paths`` (default: .env) and register the reader as a singleton.

    Raises:
        ConfigurationError: If services is None or a path is None/empty
    """
    _require_services(services)
    reader = _load_paths(paths)
    return services.add_singleton(EnvReader, reader)


def add_dotenv_settings(
    services: ServiceCollection, settings_type: Type[T], *paths: PathLike
) -> T:
    """Load ``paths`` (default: .env), bind ``settings_type`` and register it."""
    _require_services(services)
    _require_settings_type(settings_type)
    settings = EnvBinder(_load_paths(paths)).bind(settings_type)
    return services.add_singleton(settings_type, settings)


def add_custom_env(
    services: ServiceCollection,
    base_path: Optional[PathLike] = None,
    environment_name: Optional[str] = None,
    context: Optional[EnvironmentContext] = None,
) -> EnvReader:
    """Load the environment overlay and register the reader as a singleton.

    Args:
        services: Collection to register into
        base_path: Directory holding the .env files
        environment_name: Environment name (e.g. dev, production)
        context: Fallback base path and current environment
    """
    _require_services(services)
    reader = _load_custom(base_path, environment_name, context)
    return services.add_singleton(EnvReader, reader)


def add_custom_env_settings(
    services: ServiceCollection,
    settings_type: Type[T],
    base_path: Optional[PathLike] = None,
    environment_name: Optional[str] = None,
    context: Optional[EnvironmentContext] = None,
) -> T:
    """Load the environment overlay, bind ``settings_type`` and register it."""
    _require_services(services)
    _require_settings_type(settings_type)
    reader = _load_custom(base_path, environment_name, context)
    settings = EnvBinder(reader).bind(settings_type)
    return services.add_singleton(settings_type, settings)


__all__ = [
    "ServiceCollection",
    "add_dotenv",
    "add_dotenv_settings",
    "add_custom_env",
    "add_custom_env_settings",
]
