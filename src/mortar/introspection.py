"""Locating types and reading their constructor parameters."""

import importlib
import inspect
import sys
import types
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from mortar.domain import Parameter, TypeId
from mortar.errors import ClassNotFoundError

__all__ = ["locate", "constructor_parameters", "is_constructible", "type_name"]

_NONE_TYPE = type(None)

PRIMITIVE_TYPES = frozenset(
    {str, int, float, bool, bytes, bytearray, complex, list, dict, tuple, set, frozenset,
     object, type, _NONE_TYPE}
)


def type_name(type_id: TypeId) -> str:
    if inspect.isclass(type_id):
        return type_id.__name__
    return str(type_id)


def locate(type_id: TypeId) -> type:
    """Return the class named by ``type_id``.

    Classes are returned unchanged. Strings are dotted import paths, with the
    module and attribute parts separated either by the last importable dot or
    by an explicit colon.

    Raises:
        ClassNotFoundError: If no module/attribute pair yields a class.

    Example:
        >>> locate("collections.OrderedDict")
        <class 'collections.OrderedDict'>
        >>> locate("collections:OrderedDict")
        <class 'collections.OrderedDict'>
    """
    if inspect.isclass(type_id):
        return type_id
    if not isinstance(type_id, str) or not type_id:
        raise ClassNotFoundError(repr(type_id), "not a class or import path")

    if ":" in type_id:
        module_name, _, attribute_path = type_id.partition(":")
        candidates = [(module_name, attribute_path)]
    else:
        parts = type_id.split(".")
        candidates = [
            (".".join(parts[:i]), ".".join(parts[i:])) for i in range(len(parts) - 1, 0, -1)
        ]

    for module_name, attribute_path in candidates:
        try:
            target: Any = importlib.import_module(module_name)
        except ImportError:
            continue
        try:
            for attribute in attribute_path.split("."):
                target = getattr(target, attribute)
        except AttributeError:
            continue
        if inspect.isclass(target):
            return target
        raise ClassNotFoundError(type_id, f"{attribute_path} is not a class")

    raise ClassNotFoundError(type_id)


def is_constructible(declared_type: Any) -> bool:
    """Whether auto-resolution may try to build ``declared_type`` itself.

    Only plain classes qualify; primitives, parameterised generics, unions
    and unresolved string annotations do not.
    """
    return (
        declared_type is not Any
        and get_origin(declared_type) is None
        and inspect.isclass(declared_type)
        and declared_type not in PRIMITIVE_TYPES
    )


def constructor_parameters(cls: type) -> list[Parameter]:
    """Read the constructor parameters of ``cls`` in declaration order.

    ``*args`` and ``**kwargs`` are skipped. Annotations are resolved with
    ``get_type_hints`` where possible, so postponed (string) annotations work
    for classes defined at module level.

    Example:
        >>> class Card:
        ...     def __init__(self, title: str, button: Optional[Button], size: int = 1): ...
        >>> [(p.name, p.declared_type, p.nullable) for p in constructor_parameters(Card)]
        [('title', str, False), ('button', Button, True), ('size', int, False)]
    """
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return []

    hints = _type_hints(cls)
    parameters = []
    for name, parameter in signature.parameters.items():
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        annotation = hints.get(name, parameter.annotation)
        if isinstance(annotation, str):
            annotation = _resolve_string_annotation(annotation, cls)
        declared_type, nullable = _unwrap(annotation)
        has_default = parameter.default is not inspect.Parameter.empty

        parameters.append(
            Parameter(
                name,
                declared_type,
                parameter.kind,
                has_default,
                parameter.default if has_default else None,
                nullable,
            )
        )
    return parameters


def _type_hints(cls: type) -> dict[str, Any]:
    hints: dict[str, Any] = {}
    for target in (cls, cls.__init__):
        try:
            hints.update(get_type_hints(target, include_extras=True))
        except (NameError, TypeError, AttributeError):
            continue
    return hints


def _resolve_string_annotation(annotation: str, cls: type) -> Any:
    module = sys.modules.get(cls.__module__)
    if module is not None and hasattr(module, annotation):
        return getattr(module, annotation)
    return annotation


def _unwrap(annotation: Any) -> tuple[Any, bool]:
    """Split an annotation into its declared type and whether ``None`` is accepted."""
    if annotation is inspect.Parameter.empty:
        return None, False
    if annotation is None or annotation is _NONE_TYPE:
        return _NONE_TYPE, True
    if annotation is Any:
        return Any, True

    origin = get_origin(annotation)
    if origin is Annotated:
        return _unwrap(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        remaining = tuple(arg for arg in args if arg is not _NONE_TYPE)
        nullable = len(remaining) < len(args)
        if len(remaining) == 1:
            declared_type, inner_nullable = _unwrap(remaining[0])
            return declared_type, nullable or inner_nullable
        return Union[remaining], nullable
    return annotation, False
