"""Prototype-mode container: registered component instances used as templates.

A prototype is an immutable component registered under a variant name.
Building with no overrides hands back the prototype itself; building with
overrides constructs a new component from the prototype's field values with
the overrides applied on top.

Example:
    >>> components = PrototypeContainer()
    >>> components.add(Button, Button("Submit", "primary"), "submit")
    >>> components.build(Button, variant="submit") is components.get_prototype(Button, "submit")
    True
    >>> components.build(Button, {"text": "Save"}, "submit")
    Button(text='Save', variant='primary')
"""

import inspect
import logging
from typing import Any, Mapping, Optional

from mortar.component import Component, ErrorComponent, init_fields
from mortar.config import ErrorMode, Settings, detect_production
from mortar.domain import DEFAULT_VARIANT, TypeId
from mortar.errors import (
    ContainerError,
    MissingRequiredFieldError,
    UnknownOverridePropertyError,
    VariantNotFoundError,
)
from mortar.introspection import type_name
from mortar.registry import Registry

__all__ = ["PrototypeContainer", "merge_overrides"]

logger = logging.getLogger(__name__)


def merge_overrides(prototype: Component, overrides: Optional[Mapping[str, Any]] = None) -> Component:
    """Build a component from ``prototype`` with ``overrides`` applied.

    With no overrides the prototype itself is returned. Otherwise every
    override key must name a public field that the constructor accepts; the
    new component receives all of the prototype's constructor field values,
    replaced by the overrides where they collide.

    Raises:
        UnknownOverridePropertyError: On the first key that is not an overridable field.
        MissingRequiredFieldError: If a required constructor parameter has no value.
    """
    if not overrides:
        return prototype

    cls = type(prototype)
    fields = init_fields(cls)
    for key in overrides:
        if key not in fields or key.startswith("_"):
            raise UnknownOverridePropertyError(key, cls.__qualname__)

    merged = {**{name: getattr(prototype, name) for name in fields}, **overrides}

    args = []
    kwargs = {}
    for name, parameter in inspect.signature(cls).parameters.items():
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if name in merged:
            value = merged[name]
        elif parameter.default is not inspect.Parameter.empty:
            value = parameter.default
        else:
            raise MissingRequiredFieldError(name, cls.__qualname__)

        if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[name] = value

    return cls(*args, **kwargs)


class PrototypeContainer:
    """Stores prototype components per variant and builds overridden copies.

    Args:
        error_mode: ``STRICT`` re-raises build failures, ``FALLBACK`` returns an
            :class:`ErrorComponent` instead. Defaults to the settings' mode.
        production: Whether fallback components hide diagnostics. ``None``
            defers to the settings, then to the ``MORTAR_ENV`` environment variable.
        settings: Base configuration.
    """

    def __init__(
        self,
        error_mode: Optional[ErrorMode] = None,
        production: Optional[bool] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.error_mode = error_mode or self.settings.error_mode
        self.production = detect_production(
            production if production is not None else self.settings.production,
            self.settings.env,
        )
        self.registry = Registry()

    def add(self, type_id: type, prototype: Component, variant: str = DEFAULT_VARIANT):
        """Register ``prototype`` as the template for ``variant`` of ``type_id``.

        Raises:
            TypeMismatchError: If ``type_id`` is not a component type or
                ``prototype`` is not an instance of it.
        """
        self.registry.register_prototype(type_id, prototype, variant)

    def build(
        self,
        type_id: TypeId,
        overrides: Optional[Mapping[str, Any]] = None,
        variant: str = DEFAULT_VARIANT,
    ) -> Component:
        """Build a component from the prototype registered for ``variant``.

        Raises:
            VariantNotFoundError: If no prototype is registered for the variant
                (strict mode only, as are the errors of :func:`merge_overrides`).
        """
        try:
            prototype = self.registry.prototype(type_id, variant)
            if prototype is None:
                raise VariantNotFoundError(
                    type_name(type_id), variant, self.registry.prototype_variants_of(type_id)
                )
            return merge_overrides(prototype, overrides)
        except ContainerError as e:
            if self.error_mode is ErrorMode.STRICT:
                raise
            return self._fallback(type_id, variant, e)

    def has(self, type_id: TypeId, variant: str = DEFAULT_VARIANT) -> bool:
        return self.registry.has_prototype(type_id, variant)

    def variants(self, type_id: TypeId) -> list[str]:
        return self.registry.prototype_variants_of(type_id)

    def get_prototype(self, type_id: TypeId, variant: str = DEFAULT_VARIANT) -> Optional[Component]:
        return self.registry.prototype(type_id, variant)

    def clear(self):
        self.registry.clear()

    def _fallback(self, type_id: TypeId, variant: str, error: ContainerError) -> ErrorComponent:
        if not self.production:
            logger.warning(
                "Failed to build %s[%s]: %s", type_name(type_id), variant, error, exc_info=error
            )
        return ErrorComponent(
            str(error),
            type_name(type_id),
            f"variant '{variant}'",
            self.production,
        )
