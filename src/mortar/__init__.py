"""Mortar object-construction container.

Mortar builds fully constructed objects from a type and a named variant. It is
meant for component-based rendering, where one logical widget (a button) has
several pre-configured forms (primary, secondary, danger) plus per-use
overrides, without a hand-written constructor call at every use site.

Key Features:
    - Variant-keyed recipes: ready objects, argument lists or factory functions
    - Constructor auto-wiring from standard type hints
    - Circular dependency detection with the full resolution chain
    - Instance caching keyed by type, variant and parameters
    - Immutable prototypes with per-use field overrides
    - Strict or fallback error handling for prototype builds

Basic Usage:
    >>> from mortar.container import Container
    >>> from mortar.prototypes import PrototypeContainer
    >>>
    >>> container = Container()
    >>> service = container.get(UserService)     # auto-wired and cached
    >>>
    >>> components = PrototypeContainer()
    >>> components.add(Button, Button("Submit", "primary"), "submit")
    >>> save = components.build(Button, {"text": "Save"}, "submit")

The package consists of several modules:
    - container: Factory-mode container (recipes, auto-wiring, cache)
    - prototypes: Prototype-mode container and override merging
    - registry: Variant-keyed storage of recipes and prototypes
    - resolver: Recipe replay, auto-wiring and cycle detection
    - cache: Stable parameter hashing and instance memoisation
    - component: Immutable component base type and error fallback component
    - introspection: Type lookup and constructor parameter analysis
    - domain: Core value types (Recipe, Parameter, ResolutionKey)
    - config: Settings and environment detection
    - errors: Container-specific exceptions
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
