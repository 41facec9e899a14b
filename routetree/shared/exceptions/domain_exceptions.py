"""Domain-specific exceptions."""
from .base_exceptions import RouteTreeException, ValidationError


class NameParseError(ValidationError):
    """Exception raised when a prefixed display name cannot be parsed."""

    def __init__(self, message: str, name: str = None, prefix: str = None, **kwargs):
        """Initialize name parse error.

        Args:
            message: Error message
            name: The display name that failed to parse
            prefix: Prefix of the entity type the name was parsed as
        """
        kwargs.setdefault('error_code', 'NAME_PARSE')
        super().__init__(message, field='name', value=name, **kwargs)
        self.name = name
        self.prefix = prefix


class MalformedRouteError(ValidationError):
    """Exception raised for a route that is not a single-axis segment."""

    def __init__(self, message: str, route=None, **kwargs):
        kwargs.setdefault('error_code', 'MALFORMED_ROUTE')
        super().__init__(message, field='route', value=route, **kwargs)
        self.route = route


class PinNotFoundError(RouteTreeException):
    """Exception raised when a net lists a pin with no known position."""

    def __init__(self, message: str, pin_id: int = None, **kwargs):
        """Initialize pin lookup error.

        Args:
            message: Error message
            pin_id: Identifier of the pin that could not be located
        """
        kwargs.setdefault('error_code', 'PIN_NOT_FOUND')
        super().__init__(message, **kwargs)
        self.pin_id = pin_id


class StructuralInvariantError(RouteTreeException):
    """Exception raised when a junction tree violates its structural invariants.

    Only raised while ``__debug__`` is true; running under ``python -O``
    removes these checks.
    """

    def __init__(self, message: str, net_id: int = None, **kwargs):
        kwargs.setdefault('error_code', 'STRUCTURE')
        super().__init__(message, **kwargs)
        self.net_id = net_id


class ChipParseError(RouteTreeException):
    """Exception raised when a global-routing input file cannot be parsed."""

    def __init__(self, message: str, line_number: int = None, file_path: str = None, **kwargs):
        """Initialize chip parse error.

        Args:
            message: Error message
            line_number: 1-based line number of the offending line
            file_path: Path of the file being parsed
        """
        kwargs.setdefault('error_code', 'CHIP_PARSE')
        super().__init__(message, **kwargs)
        self.line_number = line_number
        self.file_path = file_path

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.line_number is not None:
            return f"{base_msg} (line {self.line_number})"
        return base_msg
