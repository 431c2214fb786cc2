"""Environment loader for .env files.

Two ways of choosing files, one merge algorithm:

1) Explicit paths (``add_env_files(...).load()``), applied in the given order
2) Convention overlay (``load_env()``): .env, .env.{env}, .env.local,
   .env.{env}.local under a base path

Later files override earlier ones on key collision. Missing files are
skipped; malformed lines raise ParseError with file and line number.
"""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from dotenv.parser import parse_stream
from dotenv.variables import parse_variables

from envwire.config.environment import DEFAULT_ENV_FILE, EnvFileSpec, EnvironmentContext
from envwire.config.reader import EnvReader
from envwire.exceptions import ConfigurationError, ParseError
from envwire.logger import Logger, get_logger

PathLike = Union[str, Path]


def _first_line(original: str, start_line: int) -> int:
    # The parser's mark includes blank lines consumed before the statement
    stripped = original.lstrip()
    return start_line + original[: len(original) - len(stripped)].count("\n")


def parse_env_text(text: str, source: PathLike = "<string>") -> List[tuple[str, str]]:
    """Parse .env content into ordered (key, value) pairs.

    Comments and blank lines are dropped; a bare ``KEY`` yields "".

    Raises:
        ParseError: On the first statement the dotenv parser rejects
    """
    entries: List[tuple[str, str]] = []
    for binding in parse_stream(io.StringIO(text)):
        if binding.error:
            raise ParseError(
                source,
                _first_line(binding.original.string, binding.original.line),
                content=binding.original.string.strip(),
            )
        if binding.key is None:
            continue
        entries.append((binding.key, binding.value if binding.value is not None else ""))
    return entries


class EnvLoader:
    """Load .env files into an immutable EnvReader.

    Example:
        reader = EnvLoader().add_env_files("config.env", "config.local.env").load()

        reader = (
            EnvLoader()
            .set_base_path("env_files/environment/dev")
            .set_environment_name("dev")
            .load_env()
        )
    """

    def __init__(self, logger: Optional[Logger] = None, interpolate: bool = True) -> None:
        """Initialize the loader.

        Args:
            logger: Logger to report progress to (default: envwire logger)
            interpolate: Expand ${VAR} references in values
        """
        self._paths: List[Path] = []
        self._base_path: Optional[Path] = None
        self._environment_name: Optional[str] = None
        self._encoding = "utf-8"
        self._interpolate = interpolate
        self.logger = logger or get_logger()

    def add_env_files(self, *paths: Union[PathLike, Sequence[PathLike]]) -> "EnvLoader":
        """Register explicit .env files, applied in the given order.

        Accepts paths as separate arguments or as a single list/tuple.

        Raises:
            ConfigurationError: If no path is given or any path is None/empty
        """
        if len(paths) == 1 and isinstance(paths[0], (list, tuple)):
            candidates: Sequence[Optional[PathLike]] = list(paths[0])
        else:
            candidates = list(paths)  # type: ignore[arg-type]

        if not candidates:
            raise ConfigurationError("EMPTY_PATH_LIST", "At least one .env file path is required")

        for index, path in enumerate(candidates):
            if path is None or str(path) == "":
                raise ConfigurationError(
                    "INVALID_PATH",
                    "Env file paths must not be None or empty",
                    {"index": index},
                )

        self._paths.extend(Path(p) for p in candidates)  # type: ignore[arg-type]
        return self

    def set_base_path(self, path: Optional[PathLike]) -> "EnvLoader":
        """Set the directory used for convention files and relative paths.

        Raises:
            ConfigurationError: If path is None or empty
        """
        if path is None or str(path) == "":
            raise ConfigurationError("INVALID_BASE_PATH", "Base path must not be None or empty")
        self._base_path = Path(path)
        return self

    def set_environment_name(self, name: Optional[str]) -> "EnvLoader":
        """Set the environment name used for convention files.

        Raises:
            ConfigurationError: If name is None or blank
        """
        if name is None or not name.strip():
            raise ConfigurationError(
                "INVALID_ENVIRONMENT_NAME", "Environment name must not be None or empty"
            )
        self._environment_name = name.strip()
        return self

    def set_encoding(self, encoding: str) -> "EnvLoader":
        if not encoding:
            raise ConfigurationError("INVALID_ENCODING", "Encoding must not be empty")
        self._encoding = encoding
        return self

    def load(self) -> EnvReader:
        """Read the explicitly added files (default: ./.env) in order."""
        paths = self._paths or [Path(DEFAULT_ENV_FILE)]
        specs = [
            EnvFileSpec(priority=i, path=self._resolve(p), optional=False)
            for i, p in enumerate(paths)
        ]
        return self._load_specs(specs)

    def load_env(self, context: Optional[EnvironmentContext] = None) -> EnvReader:
        """Read the convention overlay for the configured environment.

        Explicit ``set_base_path`` / ``set_environment_name`` values take
        precedence over the context; the context's ``current_environment``
        is the fallback name.
        """
        context = context or EnvironmentContext()
        resolved = EnvironmentContext(
            base_path=self._base_path or context.base_path,
            environment_name=self._environment_name or context.environment_name,
            current_environment=context.current_environment,
        )
        self.logger.debug(
            "Resolving env overlay",
            base_path=str(resolved.resolved_base_path()),
            environment=resolved.resolved_environment(),
        )
        return self._load_specs(resolved.file_specs())

    def _resolve(self, path: Path) -> Path:
        if self._base_path is not None and not path.is_absolute():
            return self._base_path / path
        return path

    def _read(self, path: Path) -> Optional[str]:
        """Return the file text, or None when the file does not exist."""
        try:
            return path.read_text(encoding=self._encoding)
        except (FileNotFoundError, NotADirectoryError):
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationError(
                "ENV_FILE_UNREADABLE",
                f"Cannot read env file {path}",
                {"file": str(path), "reason": str(exc)},
            ) from exc

    def _expand(self, entries: Iterable[tuple[str, str]], merged: Dict[str, str]) -> None:
        for key, value in entries:
            if self._interpolate and "$" in value:
                lookup: Dict[str, Optional[str]] = {**os.environ, **merged}
                value = "".join(atom.resolve(lookup) for atom in parse_variables(value))
            # Reassigning keeps the key's original position
            merged[key] = value

    def _load_specs(self, specs: Iterable[EnvFileSpec]) -> EnvReader:
        merged: Dict[str, str] = {}
        sources: List[Path] = []

        ordered = sorted(specs)
        for spec in ordered:
            text = self._read(spec.path)
            if text is None:
                self.logger.debug("Env file not found, skipping", file=str(spec.path))
                continue
            entries = parse_env_text(text, spec.path)
            self._expand(entries, merged)
            sources.append(spec.path)
            self.logger.debug("Loaded env file", file=str(spec.path), keys=len(entries))

        if not sources:
            self.logger.warning(
                "No env files found, using empty configuration",
                candidates=[str(s.path) for s in ordered],
            )
        else:
            self.logger.info("Env files loaded", files=len(sources), keys=len(merged))

        return EnvReader(merged, sources)


__all__ = ["EnvLoader", "parse_env_text"]
