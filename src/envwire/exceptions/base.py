"""Exception classes for envwire.

Every envwire exception carries structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context (file, line, member, raw value, ...)
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union


class EnvwireError(Exception):
    """Base exception for all envwire errors.

    Attributes:
        code: Machine-readable error code (e.g., "EMPTY_PATH_LIST")
        message: Human-readable error message
        details: Optional additional context for debugging
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with structured information.

        Args:
            code: Machine-readable error code
            message: Human-readable error message
            details: Optional additional context
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(EnvwireError):
    """Invalid or missing setup arguments.

    Raised at setup time for null/empty services or path lists, empty base
    paths, unreadable files and required keys that are not set.
    """

    pass


class ParseError(EnvwireError):
    """Malformed .env file content.

    The offending file and 1-based line number are available both as
    attributes and in ``details``.
    """

    def __init__(
        self,
        file: Union[str, Path],
        line: int,
        content: str = "",
        code: str = "MALFORMED_LINE",
    ):
        self.file = str(file)
        self.line = line
        details: Dict[str, Any] = {"file": self.file, "line": line}
        if content:
            details["content"] = content
        super().__init__(
            code=code,
            message=f"Cannot parse {self.file} at line {line}",
            details=details,
        )


class BindingError(EnvwireError):
    """A value could not be bound onto a settings member.

    ``member`` and ``value`` name the target member and the raw string that
    failed to convert. Construction failures of the settings type itself
    use the ``SETTINGS_NOT_CONSTRUCTIBLE`` code with no member.
    """

    def __init__(
        self,
        message: str,
        member: Optional[str] = None,
        value: Optional[str] = None,
        key: Optional[str] = None,
        code: str = "BINDING_FAILED",
    ):
        self.member = member
        self.value = value
        self.key = key
        details: Dict[str, Any] = {}
        if member is not None:
            details["member"] = member
        if key is not None:
            details["key"] = key
        if value is not None:
            details["value"] = value
        super().__init__(code=code, message=message, details=details)
