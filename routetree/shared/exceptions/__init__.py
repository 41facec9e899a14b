"""Shared exceptions for routetree."""
from .base_exceptions import (
    RouteTreeException, ConfigurationError, ValidationError
)
from .domain_exceptions import (
    NameParseError, MalformedRouteError, PinNotFoundError,
    StructuralInvariantError, ChipParseError
)

__all__ = [
    'RouteTreeException', 'ConfigurationError', 'ValidationError',
    'NameParseError', 'MalformedRouteError', 'PinNotFoundError',
    'StructuralInvariantError', 'ChipParseError'
]
