"""Test configuration and fixtures for routetree."""
import pytest

from routetree.domain.models import Pair, Point, Route


SAMPLE_INPUT = """\
MaxCellMove 2
GGridBoundaryIdx 1 1 4 4
NumLayer 2
Lay M1 1 H 10
Lay M2 2 V 8
NumNonDefaultSupplyGGrid 2
2 2 1 -3
4 4 2 +2
NumMasterCell 2
MasterCell MC1 2 1
Pin P1 M1
Pin P2 M2
Blkg B1 M1 2
MasterCell MC2 1 0
Pin P1 M1
NumNeighborCellExtraDemand 1
sameGGrid MC1 MC2 M1 1
NumCellInst 3
CellInst C1 MC1 1 1 Movable
CellInst C2 MC2 1 4 Fixed
CellInst C3 MC1 4 4 Movable
NumNets 2
Net N1 2 NoCstr
Pin C1/P1
Pin C2/P1
Net N2 3 M2
Pin C1/P2
Pin C3/P1
Pin C2/P1
NumRoutes 5
1 1 1 1 4 1 N1
1 1 2 1 4 2 N2
1 4 2 4 4 2 N2
1 4 1 1 4 2 N2
1 1 1 1 1 2 N2
"""


def seg(r1, c1, l1, r2, c2, l2) -> Route:
    """Shorthand for a route between two grid points."""
    return Route(Point(r1, c1, l1), Point(r2, c2, l2))


@pytest.fixture
def sample_input_text():
    """Small but complete global-routing input with two routed nets."""
    return SAMPLE_INPUT


@pytest.fixture
def sample_input_file(tmp_path, sample_input_text):
    """Sample input written to disk."""
    path = tmp_path / "case.txt"
    path.write_text(sample_input_text, encoding="utf-8")
    return path


@pytest.fixture
def two_pin_lookup():
    """Pin 0 at (0,0), pin 1 at (0,3)."""
    positions = {0: Pair(0, 0), 1: Pair(0, 3)}
    return positions.get


@pytest.fixture
def square_segments():
    """A closed 3x3 square on layer 1: four segments, one of them closes the loop."""
    return [
        seg(0, 0, 1, 0, 3, 1),
        seg(0, 3, 1, 3, 3, 1),
        seg(3, 3, 1, 3, 0, 1),
        seg(3, 0, 1, 0, 0, 1),
    ]
