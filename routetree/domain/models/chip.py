"""Domain models for the chip: layers, master cells, cell instances and nets."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple
import logging

import numpy as np

from .geometry import Pair
from .naming import Named
from .net import Net

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Preferred routing direction of a layer."""
    HORIZONTAL = "H"
    VERTICAL = "V"


class ConflictType(Enum):
    """Kinds of extra demand between neighbouring master cells."""
    ADJ_H_GGRID = "adjHGGrid"
    SAME_GGRID = "sameGGrid"


class CellType(Enum):
    """Whether a cell instance may be moved."""
    MOVABLE = "Movable"
    FIXED = "Fixed"


@dataclass
class Layer(Named):
    """Domain entity representing a routing layer and its grid capacity."""
    PREFIX = "M"

    id: int
    direction: Direction
    dim: Pair[int]
    capacity: np.ndarray = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.capacity is None:
            self.capacity = np.zeros((self.dim.x, self.dim.y), dtype=np.int64)

    @classmethod
    def with_supply(cls, ident: int, direction: Direction, dim: Pair[int], supply: int) -> 'Layer':
        """Create a layer whose every grid cell holds ``supply`` tracks."""
        capacity = np.full((dim.x, dim.y), supply, dtype=np.int64)
        return cls(ident, direction, dim, capacity)

    def _in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.dim.x and 0 <= col < self.dim.y

    def get_capacity(self, row: int, col: int) -> Optional[int]:
        """Capacity at a 0-based grid cell, or None outside the grid."""
        if not self._in_bounds(row, col):
            return None
        return int(self.capacity[row, col])

    def adjust_capacity(self, row: int, col: int, delta: int) -> bool:
        """Add ``delta`` to a grid cell's capacity. Returns False outside the grid."""
        if not self._in_bounds(row, col):
            return False
        self.capacity[row, col] += delta
        return True

    @property
    def total_capacity(self) -> int:
        return int(self.capacity.sum())


@dataclass(frozen=True)
class MasterPin(Named):
    """Pin of a master cell, fixed to one layer."""
    PREFIX = "P"

    id: int
    layer: int


@dataclass(frozen=True)
class Blockage(Named):
    """Routing blockage inside a master cell."""
    PREFIX = "B"

    id: int
    layer: int
    demand: int


@dataclass(frozen=True)
class Conflict:
    """Extra demand when two master cells are placed too close together."""
    kind: ConflictType
    id: int        # the other master cell
    layer: int
    demand: int


@dataclass
class MasterCell(Named):
    """Cell template: its pins and blockages."""
    PREFIX = "MC"

    id: int
    pins: Set[MasterPin] = field(default_factory=set)
    blockages: Set[Blockage] = field(default_factory=set)

    def get_pin(self, pin_id: int) -> Optional[MasterPin]:
        for pin in self.pins:
            if pin.id == pin_id:
                return pin
        return None


@dataclass
class Cell(Named):
    """Placed instance of a master cell."""
    PREFIX = "C"

    id: int
    master: int
    movable: CellType
    position: Pair[int]
    pins: List[int] = field(default_factory=list)  # global pin ids

    @property
    def is_movable(self) -> bool:
        return self.movable == CellType.MOVABLE


@dataclass
class Chip:
    """Aggregate root for a global-routing problem instance.

    Grid coordinates are the ones used by the input file, so the grid
    starts at ``(row_begin, col_begin)`` rather than at the origin.
    """
    max_cell_move: int = 0
    boundary: Tuple[int, int, int, int] = (1, 1, 1, 1)
    layers: List[Layer] = field(default_factory=list)
    master_cells: List[MasterCell] = field(default_factory=list)
    conflicts: Dict[int, Set[Conflict]] = field(default_factory=dict)
    cells: List[Cell] = field(default_factory=list)
    nets: List[Net] = field(default_factory=list)

    # Global pin registry: pin id -> (cell id, master pin id)
    pins: List[Tuple[int, int]] = field(default_factory=list)
    _pin_ids: Dict[Tuple[int, int], int] = field(default_factory=dict, init=False, repr=False)

    @property
    def dim(self) -> Pair[int]:
        """Grid dimensions as (rows, columns)."""
        row_begin, col_begin, row_end, col_end = self.boundary
        return Pair(row_end - row_begin + 1, col_end - col_begin + 1)

    def to_grid(self, row: int, col: int) -> Tuple[int, int]:
        """Convert file coordinates to 0-based capacity array indices."""
        row_begin, col_begin, _, _ = self.boundary
        return row - row_begin, col - col_begin

    def get_layer(self, layer_id: int) -> Optional[Layer]:
        if 0 <= layer_id < len(self.layers):
            return self.layers[layer_id]
        return None

    def get_capacity(self, row: int, col: int, layer_id: int) -> Optional[int]:
        """Capacity of a grid cell given in file coordinates."""
        layer = self.get_layer(layer_id)
        if layer is None:
            return None
        return layer.get_capacity(*self.to_grid(row, col))

    def adjust_capacity(self, row: int, col: int, layer_id: int, delta: int) -> bool:
        layer = self.get_layer(layer_id)
        if layer is None:
            return False
        return layer.adjust_capacity(*self.to_grid(row, col), delta)

    def add_conflict(self, master_a: int, master_b: int, kind: ConflictType,
                     layer: int, demand: int) -> None:
        """Record a conflict between two master cells in both directions."""
        self.conflicts.setdefault(master_a, set()).add(Conflict(kind, master_b, layer, demand))
        self.conflicts.setdefault(master_b, set()).add(Conflict(kind, master_a, layer, demand))

    def add_cell(self, cell: Cell) -> Cell:
        """Add a cell instance and register one global pin per master pin."""
        master = self.master_cells[cell.master]
        for master_pin in sorted(master.pins, key=lambda pin: pin.id):
            cell.pins.append(self.register_pin(cell.id, master_pin.id))
        self.cells.append(cell)
        return cell

    def register_pin(self, cell_id: int, master_pin_id: int) -> int:
        key = (cell_id, master_pin_id)
        if key not in self._pin_ids:
            self._pin_ids[key] = len(self.pins)
            self.pins.append(key)
        return self._pin_ids[key]

    def find_pin(self, cell_id: int, master_pin_id: int) -> Optional[int]:
        """Global pin id of a cell's master pin, if registered."""
        return self._pin_ids.get((cell_id, master_pin_id))

    def pin_position(self, pin_id: int) -> Optional[Pair[int]]:
        """Grid position of a global pin: the position of its cell."""
        if not 0 <= pin_id < len(self.pins):
            return None
        cell_id, _ = self.pins[pin_id]
        return self.cells[cell_id].position

    def pin_layer(self, pin_id: int) -> Optional[int]:
        if not 0 <= pin_id < len(self.pins):
            return None
        cell_id, master_pin_id = self.pins[pin_id]
        master_pin = self.master_cells[self.cells[cell_id].master].get_pin(master_pin_id)
        return master_pin.layer if master_pin else None

    def pin_name(self, pin_id: int) -> str:
        """Pin name as written in net declarations, e.g. ``C3/P1``."""
        cell_id, master_pin_id = self.pins[pin_id]
        return f"{Cell.to_name(cell_id)}/{MasterPin.to_name(master_pin_id)}"

    def get_net(self, net_id: int) -> Optional[Net]:
        for net in self.nets:
            if net.id == net_id:
                return net
        return None
