"""Read-only view over the key/value pairs loaded from .env files."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Tuple

from envwire.exceptions import BindingError, ConfigurationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on", "y", "t"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", "n", "f", ""})


def parse_bool(value: str) -> Optional[bool]:
    """Interpret a .env string as a boolean, or None if it is not one."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


class EnvReader(Mapping[str, str]):
    """Immutable, ordered mapping of environment keys to string values.

    Keys keep the case they were parsed with and the order in which they
    were first defined. ``reader[key]`` raises ``KeyError`` for unknown
    keys; use ``get`` or the typed accessors for optional values.

    Attributes:
        sources: Files that were actually read, in load order
    """

    def __init__(
        self,
        values: Optional[Mapping[str, str]] = None,
        sources: Iterable[Path] = (),
    ) -> None:
        self._values: Mapping[str, str] = MappingProxyType(dict(values or {}))
        self._sources: Tuple[Path, ...] = tuple(Path(p) for p in sources)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EnvReader):
            return dict(self._values) == dict(other._values)
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"EnvReader(keys={list(self._values)!r})"

    @property
    def sources(self) -> Tuple[Path, ...]:
        return self._sources

    def to_dict(self) -> dict[str, str]:
        """Return a mutable copy of the loaded values."""
        return dict(self._values)

    def require(self, key: str) -> str:
        """Return the value for ``key`` or raise ConfigurationError."""
        if key not in self._values:
            raise ConfigurationError(
                "REQUIRED_KEY_MISSING",
                f"Required environment key '{key}' is not set",
                {"key": key, "sources": [str(p) for p in self._sources]},
            )
        return self._values[key]

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        """Return ``key`` as an int, ``default`` when unset.

        Raises:
            BindingError: If the value is set but not an integer
        """
        raw = self._values.get(key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise BindingError(
                f"Value of '{key}' is not an integer", key=key, value=raw
            ) from exc

    def get_float(self, key: str, default: Optional[float] = None) -> Optional[float]:
        raw = self._values.get(key)
        if raw is None:
            return default
        try:
            return float(raw.strip())
        except ValueError as exc:
            raise BindingError(
                f"Value of '{key}' is not a number", key=key, value=raw
            ) from exc

    def get_bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        raw = self._values.get(key)
        if raw is None:
            return default
        result = parse_bool(raw)
        if result is None:
            raise BindingError(f"Value of '{key}' is not a boolean", key=key, value=raw)
        return result


__all__ = ["EnvReader", "parse_bool"]
