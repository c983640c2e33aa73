"""Immutable component base type and the error fallback component.

Components are plain value objects: a ``Component`` subclass declared as a
frozen dataclass, whose public fields are readable by name. The container
relies on that immutability when it hands out the same prototype instance to
every caller.

Each component class may carry a jinja2 ``template`` which ``render`` fills
in with the component's public fields.

Example:
    >>> @dataclass(frozen=True)
    ... class Button(Component):
    ...     template: ClassVar[str] = "<button class='{{ style }}'>{{ text }}</button>"
    ...     text: str
    ...     style: str = "primary"
    >>>
    >>> Button("Save").render()
    "<button class='primary'>Save</button>"
"""

import dataclasses
import inspect
from functools import lru_cache
from typing import Any, ClassVar

from jinja2 import Environment, Template
from markupsafe import Markup

__all__ = ["Component", "ErrorComponent", "is_component_type", "public_fields", "init_fields"]


_environment = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)


@lru_cache(maxsize=None)
def _compile(source: str) -> Template:
    return _environment.from_string(source)


class Component:
    """Base class for immutable, attribute-only components."""

    template: ClassVar[str] = ""

    def fields(self) -> dict[str, Any]:
        """Snapshot of the component's public field values, keyed by name."""
        return {name: getattr(self, name) for name in public_fields(type(self))}

    def render(self) -> Markup:
        """Render the class template with the public fields.

        The result is marked safe, so a component rendered inside another
        component's template is not escaped twice.
        """
        return Markup(_compile(self.template).render(**self.fields()))


def is_component_type(candidate: Any) -> bool:
    """Check that ``candidate`` is a ``Component`` subclass declared as a frozen dataclass."""
    return (
        inspect.isclass(candidate)
        and issubclass(candidate, Component)
        and dataclasses.is_dataclass(candidate)
        and candidate.__dataclass_params__.frozen
    )


def public_fields(cls: type) -> list[str]:
    """Names of the dataclass fields of ``cls`` that do not start with an underscore."""
    return [f.name for f in dataclasses.fields(cls) if not f.name.startswith("_")]


def init_fields(cls: type) -> list[str]:
    """Names of the dataclass fields of ``cls`` that its ``__init__`` accepts, private ones included."""
    return [f.name for f in dataclasses.fields(cls) if f.init]


_ERROR_TEMPLATE = """\
{% if is_production %}
<!-- Component error: {{ original_type }} -->
{% else %}
<div class="component-error" style="border: 1px solid #dc2626; background: #fef2f2; padding: 1rem; margin: 0.5rem; border-radius: 0.375rem;">
    <div style="font-weight: 600; color: #dc2626; margin-bottom: 0.5rem;">Component Error</div>
    <div style="margin-bottom: 0.25rem;">{{ message }}</div>
{% if context %}
    <div style="font-size: 0.875rem; color: #6b7280; margin-bottom: 0.25rem;">Context: {{ context }}</div>
{% endif %}
    <div style="font-size: 0.75rem; color: #9ca3af;">Component: {{ original_type }}</div>
</div>
{% endif %}
"""


@dataclasses.dataclass(frozen=True)
class ErrorComponent(Component):
    """Placeholder returned instead of a component whose build failed.

    In production it renders as an HTML comment naming only the originating
    type; otherwise it renders a visible block with the message and context.
    """

    template: ClassVar[str] = _ERROR_TEMPLATE

    message: str
    original_type: str
    context: str = ""
    is_production: bool = False
