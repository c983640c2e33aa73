import logging
from dataclasses import InitVar, dataclass, field

import pytest

from mortar.component import Component, ErrorComponent
from mortar.config import ErrorMode, Settings
from mortar.errors import (
    MissingRequiredFieldError,
    TypeMismatchError,
    UnknownOverridePropertyError,
    VariantNotFoundError,
)
from mortar.prototypes import PrototypeContainer, merge_overrides
from tests.components import Button, Card, Empty, Printer, WithDefaults


@pytest.fixture
def components():
    return PrototypeContainer()


@pytest.fixture
def fallback_components():
    return PrototypeContainer(ErrorMode.FALLBACK, production=False)


def test_adds_and_retrieves_prototypes(components):
    button = Button("Submit")
    components.add(Button, button, "submit")

    assert components.has(Button, "submit")
    assert components.get_prototype(Button, "submit") is button


def test_rejects_non_component_types(components):
    with pytest.raises(TypeMismatchError, match="must be of type Component"):
        components.add(Printer, Printer())


def test_rejects_prototype_of_another_type(components):
    with pytest.raises(TypeMismatchError, match="Prototype must be instance of"):
        components.add(Card, Button("Submit"))


def test_variants_are_listed_in_registration_order(components):
    assert components.variants(Button) == []

    components.add(Button, Button("A"), "primary")
    components.add(Button, Button("B"), "secondary")
    components.add(Button, Button("C"), "danger")

    assert components.variants(Button) == ["primary", "secondary", "danger"]


def test_missing_prototype_is_none(components):
    assert components.get_prototype(Button, "nonexistent") is None


def test_build_without_overrides_returns_the_prototype(components):
    prototype = Button("Test", "variant")
    components.add(Button, prototype)

    first = components.build(Button)
    second = components.build(Button, {}, "default")

    assert first is prototype
    assert second is prototype


def test_build_with_overrides_returns_new_component(components):
    prototype = Button("Submit", "primary")
    components.add(Button, prototype, "submit")

    saved = components.build(Button, {"text": "Save"}, "submit")

    assert saved == Button("Save", "primary")
    assert saved is not prototype
    assert prototype.text == "Submit"


def test_build_replaces_every_overridden_field(components):
    components.add(Button, Button("Submit", "primary"))

    result = components.build(Button, {"text": "Custom Text", "variant": "danger"})

    assert (result.text, result.variant) == ("Custom Text", "danger")


def test_unknown_variant_lists_available_variants(components):
    components.add(Button, Button("A"), "primary")
    components.add(Button, Button("B"), "secondary")

    with pytest.raises(VariantNotFoundError) as e:
        components.build(Button, {}, "nonexistent")

    assert "Variant 'nonexistent' not found for Button" in str(e.value)
    assert "Available: primary, secondary" in str(e.value)


def test_unknown_variant_without_registrations_says_none(components):
    with pytest.raises(VariantNotFoundError, match="Available: none"):
        components.build(Button, {}, "nonexistent")


def test_unknown_override_is_rejected(components):
    components.add(Button, Button("Submit"))

    with pytest.raises(UnknownOverridePropertyError, match="Property 'nonexistent' does not exist in Button"):
        components.build(Button, {"nonexistent": "value"})


def test_empty_component(components):
    prototype = Empty()
    components.add(Empty, prototype)

    assert components.build(Empty) is prototype


def test_defaults_survive_partial_overrides(components):
    components.add(WithDefaults, WithDefaults())

    result = components.build(WithDefaults, {"name": "custom"})

    assert (result.name, result.count, result.active) == ("custom", 10, True)


def test_nested_components(components):
    components.add(Button, Button("Submit", "primary"), "primary")
    components.add(Button, Button("Delete", "danger"), "danger")
    components.add(Card, Card("Default Card", components.build(Button, variant="primary")))

    card = components.build(Card, {
        "title": "Custom Card",
        "button": components.build(Button, {"text": "Custom Action", "variant": "success"}, "primary"),
    })

    assert card.title == "Custom Card"
    assert card.button == Button("Custom Action", "success")
    assert components.build(Card).button is components.get_prototype(Button, "primary")


def test_clear_removes_all_prototypes(components):
    components.add(Button, Button("A"), "variant1")
    components.add(Button, Button("B"), "variant2")

    components.clear()

    assert not components.has(Button, "variant1")
    assert not components.has(Button, "variant2")
    assert components.variants(Button) == []


def test_merge_keeps_fields_outside_the_constructor():
    @dataclass(frozen=True)
    class Badge(Component):
        label: str
        slug: str = field(init=False, default="badge")

    merged = merge_overrides(Badge("New"), {"label": "Hot"})

    assert merged.label == "Hot"
    assert merged.slug == "badge"


def test_fields_outside_the_constructor_cannot_be_overridden(components):
    @dataclass(frozen=True)
    class Badge(Component):
        label: str
        slug: str = field(init=False, default="badge")

    components.add(Badge, Badge("New"))

    with pytest.raises(UnknownOverridePropertyError, match="Property 'slug' does not exist in"):
        components.build(Badge, {"slug": "hot"})


def test_private_fields_are_carried_over_but_not_overridable(components):
    @dataclass(frozen=True)
    class Link(Component):
        text: str
        _href: str = "#"

    prototype = Link("Home", "/home")
    components.add(Link, prototype)

    merged = components.build(Link, {"text": "Start"})

    assert merged.text == "Start"
    assert merged._href == "/home"
    with pytest.raises(UnknownOverridePropertyError, match="Property '_href'"):
        components.build(Link, {"_href": "/elsewhere"})


def test_merge_requires_every_constructor_parameter():
    @dataclass(frozen=True)
    class Seeded(Component):
        label: str
        seed: InitVar[str]

    with pytest.raises(MissingRequiredFieldError, match="'seed' for .*Seeded"):
        merge_overrides(Seeded("a", "s"), {"label": "b"})


def test_fallback_mode_returns_error_component(fallback_components, caplog):
    with caplog.at_level(logging.WARNING, logger="mortar.prototypes"):
        result = fallback_components.build(Button, {}, "missing")

    assert isinstance(result, ErrorComponent)
    assert "Available: none" in result.message
    assert result.original_type == "Button"
    assert result.context == "variant 'missing'"
    assert not result.is_production
    assert "Failed to build Button[missing]" in caplog.text


def test_fallback_mode_in_production_does_not_log(caplog):
    components = PrototypeContainer(ErrorMode.FALLBACK, production=True)
    components.add(Button, Button("Submit"))

    with caplog.at_level(logging.WARNING, logger="mortar.prototypes"):
        result = components.build(Button, {"colour": "red"})

    assert isinstance(result, ErrorComponent)
    assert result.is_production
    assert caplog.text == ""


def test_error_mode_comes_from_settings():
    components = PrototypeContainer(settings=Settings(error_mode=ErrorMode.FALLBACK, production=True))

    assert components.error_mode is ErrorMode.FALLBACK
    assert components.production is True
    assert isinstance(components.build(Button), ErrorComponent)


def test_production_flag_defaults_from_environment(monkeypatch):
    monkeypatch.setenv("MORTAR_ENV", "development")
    assert PrototypeContainer().production is False

    monkeypatch.delenv("MORTAR_ENV")
    assert PrototypeContainer().production is True
    assert PrototypeContainer(production=False).production is False
