"""Domain models used throughout the container."""

import inspect
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Optional, Union

__all__ = [
    "DEFAULT_VARIANT",
    "TypeId",
    "RecipeKind",
    "Recipe",
    "Parameter",
    "ResolutionKey",
    "type_key",
]

DEFAULT_VARIANT = "default"

TypeId = Union[str, type]
"""Type alias for identifiers accepted wherever the container expects a type.

Either the class itself or its dotted import path. Both forms address the same
registrations.

Example:
    >>> container.get(Button)
    >>> container.get("myapp.components.Button")
"""


def type_key(type_id: TypeId) -> str:
    """Normalise a type identifier into the string used as a registry key.

    Example:
        >>> type_key(Button)                       # "myapp.components.Button"
        >>> type_key("myapp.components.Button")    # unchanged
        >>> type_key("myapp.components:Button")    # "myapp.components.Button"
    """
    if inspect.isclass(type_id):
        return f"{type_id.__module__}.{type_id.__qualname__}"
    return type_id.replace(":", ".")


class RecipeKind(Enum):
    """How a registered recipe produces its instance."""

    INSTANCE = "instance"    # Ready object, returned verbatim
    ARGUMENTS = "arguments"  # Positional arguments for the constructor
    KEYWORDS = "keywords"    # Keyword arguments for the constructor
    FACTORY = "factory"      # Callable taking (container, params)


@dataclass(frozen=True)
class Recipe:
    """A registered means of producing an instance for a (type, variant) pair.

    Attributes:
        kind: How ``value`` is turned into an instance.
        value: The ready object, argument sequence, keyword mapping or factory.
    """

    kind: RecipeKind
    value: Any

    @staticmethod
    def of(value: Any) -> "Recipe":
        """Classify a raw registration value.

        Functions, lambdas, methods and partials are factories, plain lists
        and tuples are positional arguments, plain dicts are keyword arguments
        and anything else (callable objects and named tuples included) is a
        ready instance. Wrap a value in a :class:`Recipe` to classify it
        explicitly.
        """
        if isinstance(value, Recipe):
            return value
        if inspect.isroutine(value) or isinstance(value, partial):
            return Recipe(RecipeKind.FACTORY, value)
        if type(value) in (list, tuple):
            return Recipe(RecipeKind.ARGUMENTS, tuple(value))
        if type(value) is dict:
            return Recipe(RecipeKind.KEYWORDS, dict(value))
        return Recipe(RecipeKind.INSTANCE, value)


@dataclass(frozen=True)
class Parameter:
    """A constructor parameter as seen by auto-resolution.

    Attributes:
        name: The parameter name in the constructor signature.
        declared_type: The annotated type, with any ``Optional`` unwrapped.
            ``None`` when the parameter is unannotated.
        kind: The ``inspect.Parameter`` kind.
        has_default: Whether the signature declares a default value.
        default: The default value, if any.
        nullable: Whether ``None`` is an acceptable value.
    """

    name: str
    declared_type: Optional[Any]
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    has_default: bool = False
    default: Any = None
    nullable: bool = False

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY

    @property
    def type_name(self) -> str:
        if self.declared_type is None:
            return "Any"
        if inspect.isclass(self.declared_type):
            return self.declared_type.__name__
        return str(self.declared_type).replace("typing.", "")


@dataclass(frozen=True)
class ResolutionKey:
    """Identifies one in-flight build on the resolution stack."""

    type_key: str
    variant: str

    def __str__(self) -> str:
        return f"{self.type_key}[{self.variant}]"
