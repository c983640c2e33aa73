"""Resolution of (type, variant, params) requests into instances.

The resolver replays a registered recipe when one exists for the requested
(type, variant) pair. Otherwise it auto-wires the type: each constructor
parameter is filled, in priority order, from

1. an explicitly supplied parameter value (used verbatim),
2. a recursive container lookup when the declared type is a plain class,
3. the parameter's declared default,
4. ``None`` when the parameter accepts it.

Every in-flight (type, variant) pair is tracked on a per-thread stack so that
re-entering a pair is reported as a circular dependency instead of recursing
forever.
"""

import logging
import threading
from typing import Any, Mapping, Optional

from mortar.domain import (
    DEFAULT_VARIANT,
    Parameter,
    Recipe,
    RecipeKind,
    ResolutionKey,
    TypeId,
    type_key,
)
from mortar.errors import (
    CircularDependencyError,
    ContainerError,
    ResolutionDepthExceededError,
    UnresolvableDependencyError,
    UnresolvableRequiredParameterError,
    VariantNotFoundError,
)
from mortar.introspection import constructor_parameters, is_constructible, locate, type_name
from mortar.registry import Registry

__all__ = ["Resolver"]

logger = logging.getLogger(__name__)


class Resolver:
    """Builds instances from recipes or by constructor auto-wiring.

    Args:
        registry: Where recipes are looked up.
        container: Passed to factory recipes, and used for nested lookups so
            that dependencies go through the container's cache.
        max_depth: Maximum number of nested resolutions on one stack.
    """

    def __init__(self, registry: Registry, container: Any, max_depth: int = 64):
        self._registry = registry
        self._container = container
        self._max_depth = max_depth
        self._local = threading.local()

    @property
    def stack(self) -> list[ResolutionKey]:
        """The (type, variant) pairs currently being built on this thread, outermost first."""
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    def resolve(
        self,
        type_id: TypeId,
        variant: str = DEFAULT_VARIANT,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Produce an instance of ``type_id`` for ``variant``.

        Raises:
            CircularDependencyError: If the pair is already being built.
            ResolutionDepthExceededError: If the stack is at its bound.
            VariantNotFoundError: If a named variant has no recipe and either the
                type has other variants registered or auto-wiring it fails.
            ClassNotFoundError: If the type must be constructed but cannot be located.
            UnresolvableDependencyError: If a class-typed parameter cannot be built.
            UnresolvableRequiredParameterError: If a required parameter has no value.
        """
        params = dict(params or {})
        key = ResolutionKey(type_key(type_id), variant)
        stack = self.stack

        if key in stack:
            raise CircularDependencyError(stack + [key])
        if len(stack) >= self._max_depth:
            raise ResolutionDepthExceededError(self._max_depth, stack + [key])

        stack.append(key)
        try:
            recipe = self._registry.recipe(type_id, variant)
            if recipe is not None:
                return self._replay(type_id, recipe, params)

            if variant == DEFAULT_VARIANT:
                return self.autowire(type_id, params)

            available = self._registry.variants_of(type_id)
            if available:
                raise VariantNotFoundError(type_name(type_id), variant, available)
            try:
                return self.autowire(type_id, params)
            except ContainerError as e:
                raise VariantNotFoundError(type_name(type_id), variant, available) from e
        finally:
            stack.pop()

    def autowire(self, type_id: TypeId, params: Mapping[str, Any]) -> Any:
        """Construct ``type_id`` by filling its constructor parameters."""
        cls = locate(type_id)
        args = []
        kwargs = {}
        for parameter in constructor_parameters(cls):
            value = self._argument_for(cls, parameter, params)
            if parameter.is_keyword_only:
                kwargs[parameter.name] = value
            else:
                args.append(value)

        logger.debug("Auto-wiring %s with %d argument(s)", cls.__qualname__, len(args) + len(kwargs))
        return cls(*args, **kwargs)

    def _argument_for(self, cls: type, parameter: Parameter, params: Mapping[str, Any]) -> Any:
        if parameter.name in params:
            return params[parameter.name]

        if is_constructible(parameter.declared_type):
            return self._resolve_dependency(cls, parameter)

        if parameter.has_default:
            return parameter.default

        if parameter.nullable:
            return None

        raise UnresolvableRequiredParameterError(
            parameter.name, parameter.type_name, cls.__qualname__
        )

    def _resolve_dependency(self, cls: type, parameter: Parameter) -> Any:
        dependency = parameter.declared_type
        try:
            return self._container.get(dependency)
        except Exception as e:
            if parameter.nullable:
                logger.debug(
                    "Could not resolve %s for %s.%s, using None: %s",
                    dependency.__qualname__, cls.__qualname__, parameter.name, e,
                )
                return None
            raise UnresolvableDependencyError(
                parameter.name, dependency.__qualname__, cls.__qualname__
            ) from e

    def _replay(self, type_id: TypeId, recipe: Recipe, params: dict[str, Any]) -> Any:
        logger.debug("Replaying %s recipe for %s", recipe.kind.value, type_key(type_id))
        if recipe.kind is RecipeKind.INSTANCE:
            return recipe.value
        if recipe.kind is RecipeKind.FACTORY:
            return recipe.value(self._container, params)
        cls = locate(type_id)
        if recipe.kind is RecipeKind.ARGUMENTS:
            return cls(*recipe.value)
        return cls(**recipe.value)
