"""Domain models package."""
from .geometry import Pair, Point, Route, Towards, PLANAR_DIRECTIONS
from .naming import Named
from .net import Net, NetTree, NetNode, Pointer, ViaStyle, LAYER_MAX, LAYER_MIN
from .statistics import TopologyStatistics
from .chip import (
    Chip, Layer, MasterPin, Blockage, MasterCell, Cell, Conflict,
    Direction, ConflictType, CellType
)

__all__ = [
    'Pair', 'Point', 'Route', 'Towards', 'PLANAR_DIRECTIONS',
    'Named',
    'Net', 'NetTree', 'NetNode', 'Pointer', 'ViaStyle', 'LAYER_MAX', 'LAYER_MIN',
    'Chip', 'Layer', 'MasterPin', 'Blockage', 'MasterCell', 'Cell', 'Conflict',
    'Direction', 'ConflictType', 'CellType',
    'TopologyStatistics'
]
