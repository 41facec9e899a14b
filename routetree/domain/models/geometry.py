"""Grid coordinate primitives: pairs, points, routes and directions."""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Tuple

from ...shared.exceptions import MalformedRouteError

T = TypeVar('T', int, float)


class Towards(Enum):
    """Signed axis of a route's displacement."""
    UP = "up"          # +row
    DOWN = "down"      # -row
    LEFT = "left"      # -col
    RIGHT = "right"    # +col
    TOP = "top"        # +layer
    BOTTOM = "bottom"  # -layer

    def inv(self) -> 'Towards':
        """Return the opposite direction."""
        return _INVERSE[self]

    @property
    def is_planar(self) -> bool:
        """True for row/column directions, False for layer changes."""
        return self not in (Towards.TOP, Towards.BOTTOM)


_INVERSE = {
    Towards.UP: Towards.DOWN,
    Towards.DOWN: Towards.UP,
    Towards.LEFT: Towards.RIGHT,
    Towards.RIGHT: Towards.LEFT,
    Towards.TOP: Towards.BOTTOM,
    Towards.BOTTOM: Towards.TOP,
}

# Order in which links are stored and walked
PLANAR_DIRECTIONS: Tuple[Towards, ...] = (Towards.UP, Towards.DOWN, Towards.LEFT, Towards.RIGHT)


@dataclass(frozen=True, order=True)
class Pair(Generic[T]):
    """Value object representing a 2D grid coordinate (rows, columns)."""
    x: T
    y: T

    def size(self) -> T:
        """Number of cells spanned when used as a dimension (x rows, y columns)."""
        return self.x * self.y

    def with_layer(self, lay: T) -> 'Point[T]':
        """Lift this position onto a layer."""
        return Point(self.x, self.y, lay)

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass(frozen=True, order=True)
class Point(Generic[T]):
    """Value object representing a 3D grid coordinate."""
    row: T
    col: T
    lay: T

    def flatten(self) -> Pair[T]:
        """Drop the layer."""
        return Pair(self.row, self.col)

    def __iter__(self):
        yield self.row
        yield self.col
        yield self.lay

    def __str__(self) -> str:
        return f"{self.row} {self.col} {self.lay}"


@dataclass(frozen=True)
class Route(Generic[T]):
    """Value object representing one axis-aligned wire segment."""
    source: Point[T]
    target: Point[T]

    def vector(self) -> Point[T]:
        """Displacement from source to target."""
        return Point(
            self.target.row - self.source.row,
            self.target.col - self.source.col,
            self.target.lay - self.source.lay,
        )

    def towards(self) -> Towards:
        """Classify the direction of this segment.

        Exactly one coordinate may differ between source and target.

        Raises:
            MalformedRouteError: If the segment is degenerate or spans more
                than one axis.
        """
        d_row, d_col, d_lay = self.vector()
        moved = [axis for axis in (d_row, d_col, d_lay) if axis != 0]

        if len(moved) != 1:
            kind = "degenerate" if not moved else "multi-axis"
            raise MalformedRouteError(f"Cannot classify {kind} route: {self}", route=self)

        if d_row:
            return Towards.UP if d_row > 0 else Towards.DOWN
        if d_col:
            return Towards.RIGHT if d_col > 0 else Towards.LEFT
        return Towards.TOP if d_lay > 0 else Towards.BOTTOM

    def reversed(self) -> 'Route[T]':
        return Route(self.target, self.source)

    def __str__(self) -> str:
        return f"{self.source} {self.target}"
