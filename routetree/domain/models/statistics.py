"""Summary statistics over built net topologies."""
from dataclasses import dataclass
from typing import Any, Dict, Iterable

from .net import Net


@dataclass
class TopologyStatistics:
    """Value object containing topology run statistics."""
    nets: int = 0
    junctions: int = 0
    pin_junctions: int = 0
    links: int = 0
    redundant_segments: int = 0
    vias: int = 0            # junctions whose span covers more than one layer
    output_lines: int = 0
    parse_time: float = 0.0
    total_time: float = 0.0
    memory_peak: float = 0.0

    @classmethod
    def from_nets(cls, nets: Iterable[Net]) -> 'TopologyStatistics':
        stats = cls()
        for net in nets:
            stats.nets += 1
            stats.junctions += len(net.tree)
            stats.links += net.tree.link_count
            stats.redundant_segments += len(net.tree.redundant)
            for node in net.tree:
                if node.is_pin:
                    stats.pin_junctions += 1
                low, high = node.span()
                if low < high:
                    stats.vias += 1
        return stats

    @property
    def average_junctions_per_net(self) -> float:
        if self.nets == 0:
            return 0.0
        return self.junctions / self.nets

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary."""
        return {
            'nets': self.nets,
            'junctions': self.junctions,
            'pin_junctions': self.pin_junctions,
            'average_junctions_per_net': self.average_junctions_per_net,
            'links': self.links,
            'redundant_segments': self.redundant_segments,
            'vias': self.vias,
            'output_lines': self.output_lines,
            'parse_time_seconds': self.parse_time,
            'total_time_seconds': self.total_time,
            'memory_peak_mb': self.memory_peak,
        }
