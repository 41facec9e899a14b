"""Net topology: junctions wired into a tree, and its text serialization."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple
import logging
import sys

from ...algorithms.union_find import UnionFind
from ...shared.exceptions import PinNotFoundError, StructuralInvariantError
from .geometry import Pair, Point, Route, Towards, PLANAR_DIRECTIONS
from .naming import Named

logger = logging.getLogger(__name__)

# Span reported by a junction with no links: (max representable, min representable)
LAYER_MAX = sys.maxsize
LAYER_MIN = 0

# A net may carry at most this many segments that would close a cycle
MAX_REDUNDANT_SEGMENTS = 1

PinLookup = Callable[[int], Optional[Pair[int]]]


class ViaStyle(Enum):
    """How the implicit via at each junction is written out."""
    SPLIT = "split"      # two lines: "<row> <col> <min> <net>" and "<row> <col> <max> <net>"
    SEGMENT = "segment"  # one route line: "<row> <col> <min> <row> <col> <max> <net>"


@dataclass(frozen=True)
class Pointer:
    """Link to a neighbouring junction."""
    index: int
    height: int  # layer the link runs on


@dataclass
class NetNode:
    """A junction: one distinct position of a net, optionally a pin."""
    position: Pair[int]
    id: Optional[int] = None  # pin id, None for bend/via junctions
    up: Optional[Pointer] = None
    down: Optional[Pointer] = None
    left: Optional[Pointer] = None
    right: Optional[Pointer] = None

    @property
    def is_pin(self) -> bool:
        return self.id is not None

    def neighbors(self) -> List[Optional[Pointer]]:
        return [self.up, self.down, self.left, self.right]

    def links(self) -> Iterator[Tuple[Towards, Pointer]]:
        """Present links in walk order."""
        for towards in PLANAR_DIRECTIONS:
            pointer = self.index(towards)
            if pointer is not None:
                yield towards, pointer

    def index(self, towards: Towards) -> Optional[Pointer]:
        """Link stored in a planar direction."""
        if not towards.is_planar:
            raise ValueError(f"Junctions hold no {towards.value} links")
        return getattr(self, towards.value)

    def set_link(self, towards: Towards, pointer: Pointer) -> None:
        if not towards.is_planar:
            raise ValueError(f"Junctions hold no {towards.value} links")
        previous = getattr(self, towards.value)
        if previous is not None and previous != pointer:
            logger.debug(f"Junction {self.position} {towards.value} link {previous} replaced by {pointer}")
        setattr(self, towards.value, pointer)

    def span(self) -> Tuple[int, int]:
        """(min, max) layer over this junction's links.

        This is the vertical extent of the via at the junction. A junction
        without links reports (LAYER_MAX, LAYER_MIN).
        """
        heights = [pointer.height for pointer in self.neighbors() if pointer is not None]
        if not heights:
            return LAYER_MAX, LAYER_MIN
        return min(heights), max(heights)


class NetTree:
    """Owning, indexed collection of a net's junctions.

    Links between junctions are indices into ``nodes``. Construction
    guarantees one junction per position and a connected, acyclic link
    graph; the tree is not modified afterwards.
    """

    def __init__(self, nodes: Sequence[NetNode], redundant: Sequence[Route] = ()):
        self._nodes: Tuple[NetNode, ...] = tuple(nodes)
        self.redundant: Tuple[Route, ...] = tuple(redundant)

    @classmethod
    def build(cls, conn_pins: Iterable[int], segments: Iterable[Route],
              pin_position: PinLookup, net_id: Optional[int] = None,
              sort_junctions: bool = False) -> 'NetTree':
        """Assemble the junction tree of a net.

        Args:
            conn_pins: Pins the net must connect
            segments: Wire segments produced by the router
            pin_position: Lookup from pin id to grid position
            net_id: Only used in diagnostics
            sort_junctions: Order junctions by position instead of by
                first appearance

        Raises:
            PinNotFoundError: If a listed pin has no position
            StructuralInvariantError: In debug mode, if the segments do not
                form a single tree with at most one redundant segment, or if
                two segments leave a junction in the same direction
        """
        segments = list(segments)

        # Segment endpoints first, then pins: a pin tag wins over a bare endpoint
        tags: Dict[Pair[int], Optional[int]] = {}
        for route in segments:
            tags[route.source.flatten()] = None
            tags[route.target.flatten()] = None
        for pin in conn_pins:
            position = pin_position(pin)
            if position is None:
                raise PinNotFoundError(f"Pin {pin} not found in database", pin_id=pin)
            if tags.get(position) is not None:
                logger.debug(f"Net {net_id}: pin {pin} replaces pin {tags[position]} at {position}")
            tags[position] = pin

        positions = sorted(tags) if sort_junctions else list(tags)
        nodes = [NetNode(position, tags[position]) for position in positions]
        index_of = {node.position: idx for idx, node in enumerate(nodes)}

        if __debug__:
            if len({node.position for node in nodes}) != len(nodes) or len(index_of) != len(nodes):
                raise StructuralInvariantError(
                    f"Net {net_id}: duplicate junction positions", net_id=net_id
                )

        union_find = UnionFind(len(nodes))
        redundant: List[Route] = []

        for route in segments:
            towards = route.towards()
            if not towards.is_planar:
                continue

            source_idx = index_of.get(route.source.flatten())
            target_idx = index_of.get(route.target.flatten())
            if source_idx is None or target_idx is None:
                raise StructuralInvariantError(
                    f"Net {net_id}: segment {route} ends outside the junction set", net_id=net_id
                )

            if not union_find.union(source_idx, target_idx):
                redundant.append(route)
                if __debug__ and len(redundant) > MAX_REDUNDANT_SEGMENTS:
                    raise StructuralInvariantError(
                        f"Net {net_id}: {len(redundant)} redundant segments, "
                        f"at most {MAX_REDUNDANT_SEGMENTS} allowed",
                        net_id=net_id
                    )
                continue

            if __debug__:
                for index, direction in ((source_idx, towards), (target_idx, towards.inv())):
                    if nodes[index].index(direction) is not None:
                        raise StructuralInvariantError(
                            f"Net {net_id}: segment {route} overlaps the {direction.value} link "
                            f"of junction {nodes[index].position}",
                            net_id=net_id
                        )

            cls._connect(nodes, source_idx, target_idx, route.source.lay, towards)

        if __debug__ and not union_find.done():
            raise StructuralInvariantError(
                f"Net {net_id}: segments leave {union_find.num_components()} disconnected parts",
                net_id=net_id
            )

        if redundant:
            logger.debug(f"Net {net_id}: dropped redundant segment(s) {[str(r) for r in redundant]}")

        return cls(nodes, redundant)

    @staticmethod
    def _connect(nodes: List[NetNode], sindex: int, oindex: int, height: int, towards: Towards) -> None:
        """Link two different junctions in both directions."""
        nodes[sindex].set_link(towards, Pointer(oindex, height))
        nodes[oindex].set_link(towards.inv(), Pointer(sindex, height))

    @property
    def nodes(self) -> Tuple[NetNode, ...]:
        return self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[NetNode]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> NetNode:
        return self._nodes[index]

    @property
    def root(self) -> Optional[NetNode]:
        return self._nodes[0] if self._nodes else None

    @property
    def link_count(self) -> int:
        """Number of undirected links."""
        return sum(1 for node in self._nodes for _ in node.links()) // 2

    def find(self, position: Pair[int]) -> Optional[int]:
        """Index of the junction at a position."""
        for idx, node in enumerate(self._nodes):
            if node.position == position:
                return idx
        return None

    def walk(self) -> Iterator[Tuple[int, Towards, Pointer]]:
        """Yield ``(source index, direction, pointer)`` for every link once.

        Pre-order from the first junction, directions in UP, DOWN, LEFT,
        RIGHT order, never following the link just arrived by. Uses an
        explicit stack so deep trees do not hit the recursion limit.
        """
        if not self._nodes:
            return

        stack = [(0, None, iter(PLANAR_DIRECTIONS))]
        while stack:
            index, arrived, directions = stack[-1]
            node = self._nodes[index]
            for towards in directions:
                if arrived is not None and towards == arrived.inv():
                    continue
                pointer = node.index(towards)
                if pointer is None:
                    continue
                yield index, towards, pointer
                stack.append((pointer.index, towards, iter(PLANAR_DIRECTIONS)))
                break
            else:
                stack.pop()

    def edges(self) -> Iterator[Route]:
        """Links as routes on their layer, in walk order."""
        for index, _, pointer in self.walk():
            source = self._nodes[index].position.with_layer(pointer.height)
            target = self._nodes[pointer.index].position.with_layer(pointer.height)
            yield Route(source, target)

    def reachable(self, start: int = 0) -> int:
        """Number of junctions reachable from ``start`` over links (BFS)."""
        if not self._nodes:
            return 0
        seen = {start}
        frontier = [start]
        while frontier:
            node = self._nodes[frontier.pop()]
            for _, pointer in node.links():
                if pointer.index not in seen:
                    seen.add(pointer.index)
                    frontier.append(pointer.index)
        return len(seen)

    def is_tree(self) -> bool:
        """Advisory check: connected and with one link fewer than junctions."""
        if not self._nodes:
            return True
        return self.reachable() == len(self._nodes) and self.link_count == len(self._nodes) - 1


@dataclass
class Net(Named):
    """Domain entity representing a net and its routed topology."""
    PREFIX = "N"

    id: int
    min_layer: int
    tree: NetTree = field(repr=False)

    @classmethod
    def build(cls, ident: int, min_layer: int, conn_pins: Iterable[int],
              segments: Iterable[Route], pin_position: PinLookup,
              sort_junctions: bool = False) -> 'Net':
        """Construct a net and its junction tree.

        Raises:
            PinNotFoundError: If any listed pin has no known position
        """
        tree = NetTree.build(conn_pins, segments, pin_position,
                             net_id=ident, sort_junctions=sort_junctions)
        return cls(ident, min_layer, tree)

    def via_lines(self, via_style: ViaStyle = ViaStyle.SPLIT) -> Iterator[str]:
        name = self.name
        for node in self.tree:
            row, col = node.position
            low, high = node.span()
            if via_style == ViaStyle.SEGMENT:
                yield f"{row} {col} {low} {row} {col} {high} {name}"
            else:
                yield f"{row} {col} {low} {name}"
                yield f"{row} {col} {high} {name}"

    def edge_lines(self) -> Iterator[str]:
        name = self.name
        for route in self.tree.edges():
            yield f"{route} {name}"

    def to_lines(self, via_style: ViaStyle = ViaStyle.SPLIT) -> List[str]:
        """Serialized routing lines: vias for every junction, then tree edges."""
        return list(self.via_lines(via_style)) + list(self.edge_lines())

    def serialize(self, via_style: ViaStyle = ViaStyle.SPLIT) -> str:
        return "".join(f"{line}\n" for line in self.to_lines(via_style))

    def __str__(self) -> str:
        return self.serialize()
