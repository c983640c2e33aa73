"""Variant-keyed storage of recipes and prototypes."""

import logging
import threading
from typing import Any, Callable, Optional

from mortar.component import is_component_type
from mortar.domain import DEFAULT_VARIANT, Recipe, TypeId, type_key
from mortar.errors import TypeMismatchError
from mortar.introspection import type_name

__all__ = ["Registry"]

logger = logging.getLogger(__name__)


class Registry:
    """Stores, per type, a mapping from variant name to a recipe or a prototype.

    Recipes (ready objects, argument lists, factories) drive factory-mode
    resolution; prototypes drive override-based construction. Both are keyed
    by the normalised type key and the variant name, and both preserve the
    order in which variants were first registered.

    Writes are serialised by a lock; reads are not.
    """

    def __init__(self):
        self._recipes: dict[str, dict[str, Recipe]] = {}
        self._prototypes: dict[str, dict[str, Any]] = {}
        self._clear_listeners: list[Callable[[], None]] = []
        self._lock = threading.RLock()

    def register(self, type_id: TypeId, recipe: Any, variant: str = DEFAULT_VARIANT):
        """Register a recipe for a (type, variant) pair, replacing any existing one.

        Args:
            type_id: The class or its dotted import path.
            recipe: A :class:`Recipe`, or a raw value classified by :meth:`Recipe.of`.
            variant: The variant name.
        """
        recipe = Recipe.of(recipe)
        with self._lock:
            self._recipes.setdefault(type_key(type_id), {})[variant] = recipe
        logger.debug("Registered %s recipe for %s[%s]", recipe.kind.value, type_key(type_id), variant)

    def register_prototype(self, type_id: type, prototype: Any, variant: str = DEFAULT_VARIANT):
        """Register a prototype instance for a (type, variant) pair.

        Raises:
            TypeMismatchError: If ``type_id`` is not a frozen-dataclass component type,
                or ``prototype`` is not an instance of it.
        """
        if not is_component_type(type_id):
            raise TypeMismatchError(
                f"{type_name(type_id)} must be of type Component declared as a frozen dataclass"
            )
        if not isinstance(prototype, type_id):
            raise TypeMismatchError(
                f"Prototype must be instance of {type_id.__name__}, "
                f"got {type(prototype).__name__}"
            )
        with self._lock:
            self._prototypes.setdefault(type_key(type_id), {})[variant] = prototype
        logger.debug("Registered prototype for %s[%s]", type_key(type_id), variant)

    def recipe(self, type_id: TypeId, variant: str = DEFAULT_VARIANT) -> Optional[Recipe]:
        return self._recipes.get(type_key(type_id), {}).get(variant)

    def prototype(self, type_id: TypeId, variant: str = DEFAULT_VARIANT) -> Optional[Any]:
        return self._prototypes.get(type_key(type_id), {}).get(variant)

    def has(self, type_id: TypeId, variant: str = DEFAULT_VARIANT) -> bool:
        return variant in self._recipes.get(type_key(type_id), {})

    def has_prototype(self, type_id: TypeId, variant: str = DEFAULT_VARIANT) -> bool:
        return variant in self._prototypes.get(type_key(type_id), {})

    def variants_of(self, type_id: TypeId) -> list[str]:
        """Variant names with a registered recipe, in registration order."""
        return list(self._recipes.get(type_key(type_id), {}))

    def prototype_variants_of(self, type_id: TypeId) -> list[str]:
        """Variant names with a registered prototype, in registration order."""
        return list(self._prototypes.get(type_key(type_id), {}))

    def on_clear(self, listener: Callable[[], None]):
        """Call ``listener`` whenever the registry is cleared."""
        self._clear_listeners.append(listener)

    def clear(self):
        """Drop every recipe and prototype, then notify clear listeners."""
        with self._lock:
            self._recipes.clear()
            self._prototypes.clear()
            for listener in self._clear_listeners:
                listener()
        logger.debug("Registry cleared")
