"""Convention-based .env file resolution.

Given a base directory ``P`` and an environment name ``E`` the overlay is,
lowest to highest precedence:

    P/.env
    P/.env.E
    P/.env.local        (skipped when E is "test")
    P/.env.E.local

The environment name that applies when none is given explicitly travels
on an ``EnvironmentContext`` instead of living in module-level state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Union

DEFAULT_ENV_FILE = ".env"
DEFAULT_ENVIRONMENT = "development"
TEST_ENVIRONMENT = "test"
LOCAL_SUFFIX = "local"


@dataclass(frozen=True, order=True)
class EnvFileSpec:
    """A candidate .env file.

    Attributes:
        priority: Apply order; higher priorities override lower ones
        path: File location
        optional: True for convention files that may legitimately be absent
    """

    priority: int
    path: Path = field(compare=False)
    optional: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class EnvironmentContext:
    """Where and for which environment convention files are looked up.

    Attributes:
        base_path: Directory holding the .env files (default: cwd at resolve time)
        environment_name: Explicit environment name
        current_environment: Fallback name used when no explicit name is set
    """

    base_path: Optional[Path] = None
    environment_name: Optional[str] = None
    current_environment: Optional[str] = None

    @classmethod
    def from_env(
        cls,
        prefix: str = "ENVWIRE",
        base_path: Optional[Union[str, Path]] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "EnvironmentContext":
        """Build a context whose fallback environment comes from ``{prefix}_ENV``.

        Args:
            prefix: Environment variable prefix
            base_path: Optional base directory
            env: Mapping to read instead of ``os.environ``

        Environment variables:
            {prefix}_ENV: Current environment name (e.g. dev, production)
        """
        source = os.environ if env is None else env
        current = source.get(f"{prefix}_ENV") or None
        return cls(
            base_path=Path(base_path) if base_path else None,
            current_environment=current,
        )

    def resolved_environment(self) -> str:
        return self.environment_name or self.current_environment or DEFAULT_ENVIRONMENT

    def resolved_base_path(self) -> Path:
        return self.base_path if self.base_path is not None else Path.cwd()

    def file_specs(self) -> List[EnvFileSpec]:
        """Return the overlay files in ascending priority."""
        base = self.resolved_base_path()
        environment = self.resolved_environment()

        names = [
            DEFAULT_ENV_FILE,
            f"{DEFAULT_ENV_FILE}.{environment}",
        ]
        if environment.lower() != TEST_ENVIRONMENT:
            names.append(f"{DEFAULT_ENV_FILE}.{LOCAL_SUFFIX}")
        names.append(f"{DEFAULT_ENV_FILE}.{environment}.{LOCAL_SUFFIX}")

        return [EnvFileSpec(priority=i, path=base / name) for i, name in enumerate(names)]


__all__ = [
    "DEFAULT_ENV_FILE",
    "DEFAULT_ENVIRONMENT",
    "EnvFileSpec",
    "EnvironmentContext",
]
