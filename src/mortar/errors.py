"""Exceptions raised by the container."""

from typing import Optional, Sequence

__all__ = [
    "ContainerError",
    "ClassNotFoundError",
    "VariantNotFoundError",
    "TypeMismatchError",
    "UnknownOverridePropertyError",
    "CircularDependencyError",
    "UnresolvableDependencyError",
    "UnresolvableRequiredParameterError",
    "MissingRequiredFieldError",
    "InvalidVariantError",
    "ResolutionDepthExceededError",
]


class ContainerError(Exception):
    """Base class for every error raised while registering or building components."""

    pass


class ClassNotFoundError(ContainerError, LookupError):
    """Raised when a type identifier cannot be imported or located."""

    def __init__(self, type_id: str, reason: Optional[str] = None):
        self.type_id = type_id
        message = f"Class {type_id} not found"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class VariantNotFoundError(ContainerError, LookupError):
    """Raised when no registration exists for a (type, variant) pair.

    The message always lists the variants that *are* registered for the type,
    or ``none`` when there are none.
    """

    def __init__(self, type_name: str, variant: str, available: Sequence[str]):
        self.type_name = type_name
        self.variant = variant
        self.available = list(available)
        listing = ", ".join(self.available) if self.available else "none"
        super().__init__(
            f"Variant '{variant}' not found for {type_name}. Available: {listing}"
        )


class TypeMismatchError(ContainerError, TypeError):
    """Raised when a prototype or its declared type is not what the container expects."""

    pass


class UnknownOverridePropertyError(ContainerError, AttributeError):
    """Raised when an override names a field the component does not have."""

    def __init__(self, key: str, type_name: str):
        self.key = key
        self.type_name = type_name
        super().__init__(f"Property '{key}' does not exist in {type_name}")


class CircularDependencyError(ContainerError):
    """Raised when a resolution re-enters a (type, variant) pair still being built."""

    def __init__(self, chain: Sequence):
        self.chain = list(chain)
        path = " -> ".join(str(key) for key in self.chain)
        super().__init__(f"Circular dependency detected: {path}")


class UnresolvableDependencyError(ContainerError):
    """Raised when a constructor dependency of a class type cannot be built."""

    def __init__(self, parameter: str, dependency: str, owner: str):
        self.parameter = parameter
        self.dependency = dependency
        self.owner = owner
        super().__init__(
            f"Could not resolve dependency {dependency} for parameter '{parameter}' of {owner}"
        )


class UnresolvableRequiredParameterError(ContainerError):
    """Raised when a required parameter has no supplied value, default or nullable type."""

    def __init__(self, parameter: str, declared_type: str, owner: str):
        self.parameter = parameter
        self.declared_type = declared_type
        self.owner = owner
        super().__init__(
            f"Could not resolve required parameter '{parameter}' of type {declared_type} for {owner}"
        )


class MissingRequiredFieldError(ContainerError):
    """Raised when an override merge cannot supply a required constructor field."""

    def __init__(self, field_name: str, type_name: str):
        self.field_name = field_name
        self.type_name = type_name
        super().__init__(f"Missing required field '{field_name}' for {type_name}")


class InvalidVariantError(ContainerError, TypeError):
    """Raised when the reserved ``variant`` parameter is not a string."""

    pass


class ResolutionDepthExceededError(ContainerError):
    """Raised when nested resolution goes deeper than the configured bound."""

    def __init__(self, max_depth: int, chain: Sequence):
        self.max_depth = max_depth
        self.chain = list(chain)
        super().__init__(
            f"Resolution depth exceeded {max_depth}: "
            + " -> ".join(str(key) for key in self.chain)
        )
