"""
routetree - junction-tree topology for globally routed IC nets

Turns each net's router-produced wire segments and pin positions into a
validated tree of junctions and writes it back as canonical routing lines.
"""
__version__ = "1.0.0"
__license__ = "MIT"
__description__ = "Junction-tree topology and serialization for globally routed nets"

from .domain.models import (
    Pair, Point, Route, Towards, Named,
    Net, NetTree, NetNode, Pointer, ViaStyle,
    Chip, Layer, MasterPin, Blockage, MasterCell, Cell, Conflict,
    TopologyStatistics
)
from .algorithms import UnionFind
from .infrastructure.parsers import ChipParser
from .infrastructure.serialization import format_routes, write_routes
from .application.services import TopologyService

__all__ = [
    '__version__',

    # Geometry and naming
    'Pair', 'Point', 'Route', 'Towards', 'Named',

    # Topology
    'Net', 'NetTree', 'NetNode', 'Pointer', 'ViaStyle', 'UnionFind',

    # Chip records
    'Chip', 'Layer', 'MasterPin', 'Blockage', 'MasterCell', 'Cell', 'Conflict',

    # I/O and services
    'ChipParser', 'format_routes', 'write_routes',
    'TopologyService', 'TopologyStatistics',
]
