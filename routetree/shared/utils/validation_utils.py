"""Validation utilities for routetree."""
from typing import Any, Tuple

from ..exceptions import ValidationError


def validate_grid_position(row: int, col: int, boundary: Tuple[int, int, int, int]) -> None:
    """Validate that a grid position lies inside the routing boundary.

    Args:
        row: Row index
        col: Column index
        boundary: (row_begin, col_begin, row_end, col_end), inclusive

    Raises:
        ValidationError: If the position is outside the boundary
    """
    row_begin, col_begin, row_end, col_end = boundary

    if row < row_begin or row > row_end:
        raise ValidationError(
            f"Row {row} out of bounds [{row_begin}, {row_end}]",
            field="row", value=row
        )

    if col < col_begin or col > col_end:
        raise ValidationError(
            f"Column {col} out of bounds [{col_begin}, {col_end}]",
            field="col", value=col
        )


def validate_layer_index(layer: int, max_layers: int = None) -> None:
    """Validate a 0-based layer index.

    Args:
        layer: Layer index
        max_layers: Optional maximum layer count

    Raises:
        ValidationError: If layer index is invalid
    """
    if not isinstance(layer, int):
        raise ValidationError(f"Layer must be integer, got {type(layer)}", field="layer", value=layer)

    if layer < 0:
        raise ValidationError(f"Layer index must be non-negative, got {layer}", field="layer", value=layer)

    if max_layers is not None and layer >= max_layers:
        raise ValidationError(
            f"Layer index {layer} exceeds maximum {max_layers - 1}",
            field="layer", value=layer
        )


def validate_non_negative_number(value: Any, field_name: str) -> None:
    """Validate that a value is a non-negative number.

    Raises:
        ValidationError: If value is not non-negative
    """
    if not isinstance(value, (int, float)):
        raise ValidationError(
            f"{field_name} must be numeric, got {type(value)}",
            field=field_name, value=value
        )

    if value < 0:
        raise ValidationError(
            f"{field_name} must be non-negative, got {value}",
            field=field_name, value=value
        )


def validate_count(actual: int, expected: int, what: str) -> None:
    """Validate that a section declared with ``Num...`` holds that many entries.

    Raises:
        ValidationError: If the counts differ
    """
    if actual != expected:
        raise ValidationError(
            f"Expected {expected} {what}, found {actual}",
            field=what, value=actual
        )
