"""Bind an EnvReader onto a typed settings object.

Each public member of the settings type is matched to a reader key: the
explicit key from ``env_field(key=...)`` when given, otherwise the member
name in upper snake case (``prod_env_prod`` and ``prodEnvProd`` both map
to ``PROD_ENV_PROD``). Matching is case-insensitive; an exact match of
the canonical key always wins. Values are converted to the member's
annotation.

Example:
    @dataclass(frozen=True)
    class AppSettings:
        summaries: str = ""
        port: int = 8000
        debug: bool = False
        api_url: str = env_field(key="UPSTREAM_URL", default="http://localhost")

    settings = EnvBinder(reader).bind(AppSettings)
"""

from __future__ import annotations

import dataclasses
import inspect
import re
import sys
import typing
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path, PurePath
from types import FrameType, UnionType
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin

from envwire.config.reader import EnvReader, parse_bool
from envwire.exceptions import BindingError
from envwire.logger import Logger, get_logger

T = TypeVar("T")

ENV_KEY_METADATA = "envwire_key"
LIST_SEPARATOR = ","

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

_UNION_TYPES = (Union, UnionType)


def to_env_key(name: str) -> str:
    """Convert a member name to its conventional env key (upper snake case)."""
    return _CAMEL_BOUNDARY.sub("_", name.strip("_")).upper()


def env_field(
    key: Optional[str] = None,
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **kwargs: Any,
) -> Any:
    """Dataclass ``field()`` that can pin the env key for a member."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    if key:
        metadata[ENV_KEY_METADATA] = key
    return dataclasses.field(
        default=default, default_factory=default_factory, metadata=metadata, **kwargs
    )


@dataclass(frozen=True)
class _Member:
    name: str
    key: str
    annotation: Any
    owner: type


_CLASSVAR = re.compile(r"^\s*(typing\.)?ClassVar\b")


def _own_annotations(settings_type: type) -> Dict[str, Tuple[Any, type]]:
    """Member name -> (annotation as written, class that declared it)."""
    annotations: Dict[str, Tuple[Any, type]] = {}
    for klass in reversed(settings_type.__mro__):
        if klass is object:
            continue
        for name, annotation in inspect.get_annotations(klass).items():
            annotations[name] = (annotation, klass)
    return annotations


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return bool(_CLASSVAR.match(annotation))
    return annotation is typing.ClassVar or get_origin(annotation) is typing.ClassVar


def _members(settings_type: type) -> List[_Member]:
    annotations = _own_annotations(settings_type)

    if dataclasses.is_dataclass(settings_type):
        members = []
        for f in dataclasses.fields(settings_type):
            if not f.init:
                continue
            annotation, owner = annotations.get(f.name, (f.type, settings_type))
            members.append(
                _Member(
                    name=f.name,
                    key=f.metadata.get(ENV_KEY_METADATA) or to_env_key(f.name),
                    annotation=annotation,
                    owner=owner,
                )
            )
        return members

    return [
        _Member(name=name, key=to_env_key(name), annotation=annotation, owner=owner)
        for name, (annotation, owner) in annotations.items()
        if not name.startswith("_") and not _is_classvar(annotation)
    ]


def _resolve_annotation(
    member: _Member, settings_type: type, caller: Optional[FrameType]
) -> Any:
    """Evaluate a string annotation for one member.

    Names are looked up in the declaring module, then the settings class,
    then the locals of the calling frames (innermost first), so types
    declared inside a function resolve when bound from that function.

    Raises:
        BindingError: If the annotation cannot be evaluated
    """
    annotation = member.annotation
    if not isinstance(annotation, str):
        return annotation

    module = sys.modules.get(member.owner.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    class_ns = dict(vars(settings_type))

    frame = caller
    localns = class_ns
    try:
        while True:
            try:
                return eval(annotation, globalns, localns)
            except NameError as exc:
                if frame is None:
                    raise BindingError(
                        f"Cannot resolve annotation {annotation!r} of member '{member.name}': {exc}",
                        member=member.name,
                        key=member.key,
                        code="UNRESOLVED_ANNOTATION",
                    ) from exc
                localns = {**frame.f_locals, **class_ns}
                frame = frame.f_back
            except (SyntaxError, TypeError, AttributeError) as exc:
                raise BindingError(
                    f"Invalid annotation {annotation!r} of member '{member.name}': {exc}",
                    member=member.name,
                    key=member.key,
                    code="UNRESOLVED_ANNOTATION",
                ) from exc
    finally:
        del frame


def _coerce_enum(raw: str, enum_type: Type[Enum]) -> Enum:
    wanted = raw.strip()
    for member in enum_type:
        if member.name.lower() == wanted.lower():
            return member
    for member in enum_type:
        if str(member.value) == wanted:
            return member
    raise ValueError(f"{raw!r} is not a valid {enum_type.__name__}")


def coerce_value(raw: str, annotation: Any) -> Any:
    """Convert a raw .env string to ``annotation``.

    Raises:
        ValueError: If the string cannot be converted
        TypeError: If the annotation is not supported
    """
    if annotation is Any or annotation is str:
        return raw

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin in _UNION_TYPES:
        options = [a for a in args if a is not type(None)]
        if len(options) < len(args) and raw.strip() == "":
            return None
        errors = []
        for option in options:
            try:
                return coerce_value(raw, option)
            except ValueError as exc:
                errors.append(str(exc))
        raise ValueError("; ".join(errors) or f"cannot convert {raw!r}")

    if origin in (list, List):
        item_type = args[0] if args else str
        return [coerce_value(item.strip(), item_type) for item in raw.split(LIST_SEPARATOR) if item.strip()]

    if origin is tuple and args and args[-1] is not Ellipsis:
        items = [item.strip() for item in raw.split(LIST_SEPARATOR)]
        if len(items) != len(args):
            raise ValueError(f"expected {len(args)} comma-separated items, got {len(items)}")
        return tuple(coerce_value(item, item_type) for item, item_type in zip(items, args))

    if origin is tuple:
        item_type = args[0] if args else str
        return tuple(
            coerce_value(item.strip(), item_type) for item in raw.split(LIST_SEPARATOR) if item.strip()
        )

    if annotation is bool:
        result = parse_bool(raw)
        if result is None:
            raise ValueError(f"{raw!r} is not a boolean")
        return result

    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return _coerce_enum(raw, annotation)

    if annotation in (int, float):
        return annotation(raw.strip())

    if annotation is Decimal:
        try:
            return Decimal(raw.strip())
        except InvalidOperation as exc:
            raise ValueError(f"{raw!r} is not a decimal") from exc

    if isinstance(annotation, type) and issubclass(annotation, PurePath):
        return Path(raw) if annotation is PurePath else annotation(raw)

    raise TypeError(f"Unsupported settings type {annotation!r}")


class EnvBinder:
    """Populate settings objects from an EnvReader."""

    def __init__(self, reader: EnvReader, logger: Optional[Logger] = None) -> None:
        self.reader = reader
        self.logger = logger or get_logger()
        # Upper-cased key -> key as parsed; later keys win
        self._index: Dict[str, str] = {key.upper(): key for key in reader}

    def find_key(self, canonical: str) -> Optional[str]:
        """Return the reader key matching ``canonical``, or None."""
        if canonical in self.reader:
            return canonical
        return self._index.get(canonical.upper())

    def bind(self, settings_type: Type[T]) -> T:
        """Create a new ``settings_type`` instance populated from the reader.

        Unmatched members keep their defaults; unmatched keys are ignored.

        Raises:
            BindingError: If a value cannot be converted, or the type
                cannot be constructed
        """
        caller = inspect.currentframe()
        caller = caller.f_back if caller is not None else None
        try:
            values = self._collect(settings_type, caller)
        finally:
            del caller

        instance = self._construct(settings_type, values)
        self.logger.debug(
            "Settings bound", settings=settings_type.__name__, members=len(values)
        )
        return instance

    def _collect(self, settings_type: type, caller: Optional[FrameType]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for member in _members(settings_type):
            key = self.find_key(member.key)
            if key is None:
                continue
            raw = self.reader[key]
            annotation = _resolve_annotation(member, settings_type, caller)
            try:
                values[member.name] = coerce_value(raw, annotation)
            except TypeError as exc:
                raise BindingError(
                    f"Member '{member.name}' has unsupported type {annotation!r}",
                    member=member.name,
                    key=key,
                    value=raw,
                    code="UNSUPPORTED_TYPE",
                ) from exc
            except ValueError as exc:
                raise BindingError(
                    f"Cannot bind '{key}' to member '{member.name}': {exc}",
                    member=member.name,
                    key=key,
                    value=raw,
                ) from exc
            self.logger.debug("Bound settings member", member=member.name, key=key)
        return values

    def _construct(self, settings_type: Type[T], values: Dict[str, Any]) -> T:
        try:
            if dataclasses.is_dataclass(settings_type):
                return settings_type(**values)
            instance = settings_type()
        except TypeError as exc:
            raise BindingError(
                f"Cannot construct {settings_type.__name__}: {exc}",
                code="SETTINGS_NOT_CONSTRUCTIBLE",
            ) from exc

        for name, value in values.items():
            setattr(instance, name, value)
        return instance


__all__ = ["EnvBinder", "coerce_value", "env_field", "to_env_key", "ENV_KEY_METADATA"]
