"""FastAPI integration for envwire.

- EnvProvider: FastAPI dependencies over a ServiceCollection
- create_example_app: Minimal app serving a bound settings value
"""

from envwire.web.app import AppSettings, create_example_app
from envwire.web.provider import EnvProvider

__all__ = [
    "EnvProvider",
    "AppSettings",
    "create_example_app",
]
