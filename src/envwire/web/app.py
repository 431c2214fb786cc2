"""Example FastAPI application serving a bound settings value."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from fastapi import Depends, FastAPI

from envwire.registration import ServiceCollection, add_dotenv_settings
from envwire.web.provider import EnvProvider


@dataclass(frozen=True)
class AppSettings:
    summaries: Optional[str] = None


def create_example_app(
    services: Optional[ServiceCollection] = None,
    env_files: Sequence[str] = (),
) -> FastAPI:
    """Create an app with ``GET /example`` returning ``AppSettings.summaries``.

    When ``services`` is not given, settings are loaded from ``env_files``
    (default: ./.env) at creation time.
    """
    if services is None:
        services = ServiceCollection()
        add_dotenv_settings(services, AppSettings, *env_files)

    env = EnvProvider(services)
    app = FastAPI(title="envwire example")

    @app.get("/example")
    def get_example(settings: AppSettings = Depends(env.settings(AppSettings))) -> Optional[str]:
        return settings.summaries

    return app
