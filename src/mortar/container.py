"""Factory-mode container: recipes, auto-wiring and instance caching.

Example:
    >>> container = Container()
    >>> container.add(Button, {
    ...     "default": lambda c, params: Button("Button", "primary"),
    ...     "search": lambda c, params: Button("Search", "outline"),
    ... })
    >>> container.get(Button, {"variant": "search"}).text
    'Search'
    >>> container.get(Button, {"variant": "search"}) is container.get(Button, {"variant": "search"})
    True
"""

from typing import Any, Mapping, Optional

from mortar.cache import InstanceCache
from mortar.config import Settings
from mortar.domain import DEFAULT_VARIANT, TypeId
from mortar.errors import InvalidVariantError
from mortar.registry import Registry
from mortar.resolver import Resolver

__all__ = ["Container"]

VARIANT_PARAMETER = "variant"


class Container:
    """Builds instances from registered recipes, falling back to auto-wiring.

    Registered recipes are always consulted before auto-wiring. ``get`` caches
    by type, variant and parameters; ``make`` always builds afresh.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.registry = Registry()
        self.cache = InstanceCache()
        self.resolver = Resolver(self.registry, self, self.settings.max_depth)
        self.registry.on_clear(self.cache.clear)

    def add(self, type_id: TypeId, recipe: Any):
        """Register recipes for a type.

        Args:
            type_id: The class or its dotted import path.
            recipe: Either a single factory ``(container, params) -> object``,
                registered as the default variant, or a mapping from variant
                name to factory, ready object or argument list. Values are
                classified by :meth:`Recipe.of`; wrap one as
                ``Recipe(RecipeKind.INSTANCE, obj)`` to register, say, a list
                or a callable object as a ready instance.
        """
        if isinstance(recipe, Mapping):
            for variant, variant_recipe in recipe.items():
                self.registry.register(type_id, variant_recipe, variant)
        else:
            self.registry.register(type_id, recipe, DEFAULT_VARIANT)

    def add_all(self, recipes: Mapping[TypeId, Any]):
        """Register recipes for several types at once, as by :meth:`add`."""
        for type_id, recipe in recipes.items():
            self.add(type_id, recipe)

    def get(self, type_id: TypeId, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Return the cached instance for the request, building it on first use.

        Args:
            type_id: The class or its dotted import path.
            params: Constructor parameter overrides, passed to factories as is.
                The reserved ``variant`` key selects the variant.
        """
        variant, params = _split_variant(params)
        return self.cache.get_or_build(
            type_id, variant, params, lambda: self.resolver.resolve(type_id, variant, params)
        )

    def make(self, type_id: TypeId, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Build a new instance without reading or populating the cache."""
        variant, params = _split_variant(params)
        return self.resolver.resolve(type_id, variant, params)

    def has(self, type_id: TypeId, variant: str = DEFAULT_VARIANT) -> bool:
        return self.registry.has(type_id, variant)

    def variants(self, type_id: TypeId) -> list[str]:
        return self.registry.variants_of(type_id)

    def clear_cache(self):
        """Forget cached instances but keep registrations."""
        self.cache.clear()

    def clear(self):
        """Forget all registrations and cached instances."""
        self.registry.clear()


def _split_variant(params: Optional[Mapping[str, Any]]) -> tuple[str, dict[str, Any]]:
    params = dict(params or {})
    variant = params.pop(VARIANT_PARAMETER, DEFAULT_VARIANT)
    if not isinstance(variant, str):
        raise InvalidVariantError(
            f"The '{VARIANT_PARAMETER}' parameter must be a string, got {type(variant).__name__}"
        )
    return variant, params
