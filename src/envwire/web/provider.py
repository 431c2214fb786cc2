"""FastAPI dependency injection for registered env services.

Example:
    from fastapi import Depends, FastAPI
    from envwire.registration import ServiceCollection, add_dotenv_settings
    from envwire.web import EnvProvider

    services = ServiceCollection()
    add_dotenv_settings(services, AppSettings)
    env = EnvProvider(services)

    app = FastAPI()

    @app.get("/summaries")
    def summaries(settings: AppSettings = Depends(env.settings(AppSettings))):
        return settings.summaries
"""

from __future__ import annotations

from typing import Callable, Dict, Type, TypeVar

from fastapi import HTTPException

from envwire.config import EnvReader
from envwire.logger import Logger, get_logger
from envwire.registration import ServiceCollection

T = TypeVar("T")


class EnvProvider:
    """Expose a ServiceCollection's singletons as FastAPI dependencies."""

    def __init__(self, services: ServiceCollection, logger: Logger | None = None) -> None:
        self._services = services
        self._dependencies: Dict[type, Callable[[], object]] = {}
        self.logger = logger or get_logger()

    @property
    def services(self) -> ServiceCollection:
        return self._services

    def _resolve(self, service_type: Type[T]) -> T:
        instance = self._services.get(service_type)
        if instance is None:
            self.logger.error("Service not registered", service_type=service_type.__name__)
            raise HTTPException(
                status_code=500,
                detail=f"{service_type.__name__} is not configured",
            )
        return instance

    def get_reader(self) -> EnvReader:
        """FastAPI dependency that returns the registered EnvReader."""
        return self._resolve(EnvReader)

    def settings(self, settings_type: Type[T]) -> Callable[[], T]:
        """Return a dependency that yields the registered ``settings_type``.

        The same callable is returned for repeated calls so FastAPI's
        per-request dependency cache treats it as one dependency.
        """
        if settings_type not in self._dependencies:

            def dependency() -> T:
                return self._resolve(settings_type)

            dependency.__name__ = f"get_{settings_type.__name__}"
            self._dependencies[settings_type] = dependency
        return self._dependencies[settings_type]  # type: ignore[return-value]
