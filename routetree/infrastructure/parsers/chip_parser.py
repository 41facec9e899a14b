"""Parser for the global-routing problem input format.

The file is a sequence of keyword-led sections::

    MaxCellMove 1
    GGridBoundaryIdx 1 1 3 3
    NumLayer 2
    Lay M1 1 H 10
    Lay M2 2 V 8
    NumNonDefaultSupplyGGrid 1
    2 2 1 -2
    NumMasterCell 1
    MasterCell MC1 2 1
    Pin P1 M1
    Pin P2 M1
    Blkg B1 M1 2
    NumNeighborCellExtraDemand 0
    NumCellInst 2
    CellInst C1 MC1 1 1 Movable
    CellInst C2 MC1 1 3 Fixed
    NumNets 1
    Net N1 2 NoCstr
    Pin C1/P1
    Pin C2/P1
    NumRoutes 1
    1 1 1 1 3 1 N1

Routes are grouped by net and turned into junction trees once the whole
file is read.
"""
import logging
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from ...domain.models.chip import (
    Blockage, Cell, CellType, Chip, ConflictType, Direction, Layer, MasterCell, MasterPin
)
from ...domain.models.geometry import Pair, Point, Route
from ...domain.models.net import Net
from ...shared.exceptions import ChipParseError, NameParseError, ValidationError
from ...shared.utils.validation_utils import (
    validate_count, validate_grid_position, validate_layer_index, validate_non_negative_number
)

logger = logging.getLogger(__name__)

NO_CONSTRAINT = "NoCstr"

Line = Tuple[int, List[str]]


class _NetDecl:
    """Net declaration collected before its routes are known."""

    def __init__(self, ident: int, min_layer: int, pins: List[int], line_number: int):
        self.id = ident
        self.min_layer = min_layer
        self.pins = pins
        self.line_number = line_number
        self.routes: Dict[Route, None] = {}  # ordered set


class ChipParser:
    """Parser for global-routing input files."""

    def __init__(self, sort_junctions: bool = False):
        """Initialize parser.

        Args:
            sort_junctions: Order each net's junctions by position
        """
        self.sort_junctions = sort_junctions
        self._lines: List[Line] = []
        self._cursor = 0
        self._source = "<string>"

    def load_chip(self, file_path: Union[str, Path], encoding: str = "utf-8") -> Chip:
        """Parse a global-routing input file."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {file_path}")

        logger.info(f"Parsing global-routing input {path}")
        with open(path, 'r', encoding=encoding) as f:
            return self.parse_text(f.read(), source=str(path))

    def parse_text(self, text: str, source: str = "<string>") -> Chip:
        """Parse global-routing input from a string."""
        self._source = source
        self._lines = [
            (number, line.split())
            for number, line in enumerate(text.splitlines(), start=1)
            if line.strip() and not line.lstrip().startswith('#')
        ]
        self._cursor = 0

        chip = Chip()
        declarations: List[_NetDecl] = []
        handlers: Dict[str, Callable[[Chip, List[str]], None]] = {
            "MaxCellMove": self._parse_max_cell_move,
            "GGridBoundaryIdx": self._parse_boundary,
            "NumLayer": self._parse_layers,
            "NumNonDefaultSupplyGGrid": self._parse_supply,
            "NumMasterCell": self._parse_master_cells,
            "NumNeighborCellExtraDemand": self._parse_extra_demand,
            "NumCellInst": self._parse_cells,
        }

        while self._cursor < len(self._lines):
            number, tokens = self._next()
            keyword = tokens[0]
            with self._at(number):
                if keyword in handlers:
                    handlers[keyword](chip, tokens)
                elif keyword == "NumNets":
                    declarations = self._parse_nets(chip, tokens)
                elif keyword == "NumRoutes":
                    self._parse_routes(chip, tokens, declarations)
                else:
                    raise ChipParseError(f"Unknown section keyword {keyword!r}")

        chip.nets = [self._build_net(chip, decl) for decl in declarations]
        logger.info(
            f"Parsed {source}: {len(chip.layers)} layers, {len(chip.cells)} cells, "
            f"{len(chip.nets)} nets"
        )
        return chip

    # -- cursor helpers -----------------------------------------------------

    def _next(self) -> Line:
        if self._cursor >= len(self._lines):
            last = self._lines[-1][0] if self._lines else 0
            raise ChipParseError("Unexpected end of input", line_number=last, file_path=self._source)
        line = self._lines[self._cursor]
        self._cursor += 1
        return line

    def _take(self, count: int) -> Iterator[Line]:
        for _ in range(count):
            yield self._next()

    def _at(self, line_number: int) -> '_LineContext':
        return _LineContext(line_number, self._source)

    @staticmethod
    def _expect(tokens: List[str], keyword: Optional[str], minimum: int) -> None:
        if keyword is not None and tokens[0] != keyword:
            raise ChipParseError(f"Expected {keyword!r}, found {tokens[0]!r}")
        if len(tokens) < minimum:
            raise ChipParseError(f"Expected at least {minimum} fields, found {len(tokens)}")

    @staticmethod
    def _count(tokens: List[str]) -> int:
        ChipParser._expect(tokens, None, 2)
        count = int(tokens[1])
        validate_non_negative_number(count, tokens[0])
        return count

    # -- sections -----------------------------------------------------------

    def _parse_max_cell_move(self, chip: Chip, tokens: List[str]) -> None:
        chip.max_cell_move = self._count(tokens)

    def _parse_boundary(self, chip: Chip, tokens: List[str]) -> None:
        self._expect(tokens, "GGridBoundaryIdx", 5)
        row_begin, col_begin, row_end, col_end = (int(token) for token in tokens[1:5])
        if row_end < row_begin or col_end < col_begin:
            raise ChipParseError(f"Empty grid boundary {tokens[1:5]}")
        chip.boundary = (row_begin, col_begin, row_end, col_end)

    def _parse_layers(self, chip: Chip, tokens: List[str]) -> None:
        for number, fields in self._take(self._count(tokens)):
            with self._at(number):
                self._expect(fields, "Lay", 5)
                ident = Layer.from_name(fields[1])
                validate_count(ident, len(chip.layers), "layer index")
                direction = Direction(fields[3])
                chip.layers.append(Layer.with_supply(ident, direction, chip.dim, int(fields[4])))

    def _parse_supply(self, chip: Chip, tokens: List[str]) -> None:
        for number, fields in self._take(self._count(tokens)):
            with self._at(number):
                self._expect(fields, None, 4)
                row, col, lay, delta = (int(token) for token in fields[:4])
                validate_grid_position(row, col, chip.boundary)
                validate_layer_index(lay - 1, len(chip.layers))
                chip.adjust_capacity(row, col, lay - 1, delta)

    def _parse_master_cells(self, chip: Chip, tokens: List[str]) -> None:
        for number, fields in self._take(self._count(tokens)):
            with self._at(number):
                self._expect(fields, "MasterCell", 4)
                master = MasterCell(MasterCell.from_name(fields[1]))
                validate_count(master.id, len(chip.master_cells), "master cell index")
                pin_count, blockage_count = int(fields[2]), int(fields[3])

            for pin_number, pin_fields in self._take(pin_count):
                with self._at(pin_number):
                    self._expect(pin_fields, "Pin", 3)
                    master.pins.add(MasterPin(MasterPin.from_name(pin_fields[1]),
                                              self._layer(chip, pin_fields[2])))

            for blk_number, blk_fields in self._take(blockage_count):
                with self._at(blk_number):
                    self._expect(blk_fields, "Blkg", 4)
                    master.blockages.add(Blockage(Blockage.from_name(blk_fields[1]),
                                                  self._layer(chip, blk_fields[2]),
                                                  int(blk_fields[3])))

            chip.master_cells.append(master)

    def _parse_extra_demand(self, chip: Chip, tokens: List[str]) -> None:
        for number, fields in self._take(self._count(tokens)):
            with self._at(number):
                self._expect(fields, None, 5)
                kind = ConflictType(fields[0])
                master_a = self._master(chip, fields[1])
                master_b = self._master(chip, fields[2])
                chip.add_conflict(master_a, master_b, kind, self._layer(chip, fields[3]), int(fields[4]))

    def _parse_cells(self, chip: Chip, tokens: List[str]) -> None:
        for number, fields in self._take(self._count(tokens)):
            with self._at(number):
                self._expect(fields, "CellInst", 6)
                ident = Cell.from_name(fields[1])
                validate_count(ident, len(chip.cells), "cell index")
                row, col = int(fields[3]), int(fields[4])
                validate_grid_position(row, col, chip.boundary)
                chip.add_cell(Cell(ident, self._master(chip, fields[2]), CellType(fields[5]), Pair(row, col)))

    def _parse_nets(self, chip: Chip, tokens: List[str]) -> List[_NetDecl]:
        declarations = []
        for number, fields in self._take(self._count(tokens)):
            with self._at(number):
                # An optional trailing weight field is ignored
                self._expect(fields, "Net", 4)
                ident = Net.from_name(fields[1])
                validate_count(ident, len(declarations), "net index")
                min_layer = 0 if fields[3] == NO_CONSTRAINT else self._layer(chip, fields[3])
                pin_count = int(fields[2])

            pins = []
            for pin_number, pin_fields in self._take(pin_count):
                with self._at(pin_number):
                    self._expect(pin_fields, "Pin", 2)
                    pins.append(self._pin(chip, pin_fields[1]))

            declarations.append(_NetDecl(ident, min_layer, pins, number))
        return declarations

    def _parse_routes(self, chip: Chip, tokens: List[str], declarations: List[_NetDecl]) -> None:
        for number, fields in self._take(self._count(tokens)):
            with self._at(number):
                self._expect(fields, None, 7)
                src_row, src_col, src_lay, dst_row, dst_col, dst_lay = (int(token) for token in fields[:6])
                ident = Net.from_name(fields[6])
                if not 0 <= ident < len(declarations):
                    raise ChipParseError(f"Route references undeclared net {fields[6]}")
                for lay in (src_lay, dst_lay):
                    validate_layer_index(lay - 1, len(chip.layers))
                route = Route(Point(src_row, src_col, src_lay), Point(dst_row, dst_col, dst_lay))
                route.towards()  # rejects degenerate and multi-axis segments
                declarations[ident].routes[route] = None

    # -- lookups ------------------------------------------------------------

    @staticmethod
    def _layer(chip: Chip, name: str) -> int:
        layer = Layer.from_name(name)
        validate_layer_index(layer, len(chip.layers))
        return layer

    @staticmethod
    def _master(chip: Chip, name: str) -> int:
        master = MasterCell.from_name(name)
        if not 0 <= master < len(chip.master_cells):
            raise ChipParseError(f"Unknown master cell {name}")
        return master

    @staticmethod
    def _pin(chip: Chip, name: str) -> int:
        cell_name, sep, pin_name = name.partition('/')
        if not sep:
            raise ChipParseError(f"Pin reference {name!r} is not <cell>/<pin>")
        cell_id = Cell.from_name(cell_name)
        if not 0 <= cell_id < len(chip.cells):
            raise ChipParseError(f"Unknown cell {cell_name}")
        pin_id = chip.find_pin(cell_id, MasterPin.from_name(pin_name))
        if pin_id is None:
            raise ChipParseError(f"Cell {cell_name} has no pin {pin_name}")
        return pin_id

    def _build_net(self, chip: Chip, decl: _NetDecl) -> Net:
        net = Net.build(decl.id, decl.min_layer, decl.pins, decl.routes.keys(),
                        chip.pin_position, sort_junctions=self.sort_junctions)
        logger.debug(
            f"Built {net.name} (line {decl.line_number}): {len(decl.pins)} pins, {len(decl.routes)} segments, "
            f"{len(net.tree)} junctions"
        )
        return net


class _LineContext:
    """Attach a line number to errors raised while handling one line."""

    def __init__(self, line_number: int, source: str):
        self.line_number = line_number
        self.source = source

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc is None:
            return False
        if isinstance(exc, ChipParseError):
            if exc.line_number is None:
                exc.line_number = self.line_number
                exc.file_path = self.source
            return False
        if isinstance(exc, (ValueError, NameParseError, ValidationError)):
            raise ChipParseError(str(exc), line_number=self.line_number, file_path=self.source) from exc
        return False
