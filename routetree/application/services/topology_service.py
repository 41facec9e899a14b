"""Application service: parse a routed design, build net trees, write them out."""
import logging
from pathlib import Path
from typing import List, Optional, TextIO, Union

from ...domain.models.chip import Chip
from ...domain.models.net import ViaStyle
from ...domain.models.statistics import TopologyStatistics
from ...infrastructure.parsers.chip_parser import ChipParser
from ...infrastructure.serialization.route_writer import (
    dump_routes, format_routes, route_lines, write_routes
)
from ...shared.configuration.settings import ApplicationSettings
from ...shared.utils.logging_utils import get_context_logger
from ...shared.utils.performance_utils import memory_profiler, timing_context

logger = logging.getLogger(__name__)


class TopologyService:
    """Coordinates parsing, tree construction and output for one design."""

    def __init__(self, settings: Optional[ApplicationSettings] = None):
        self.settings = settings or ApplicationSettings()
        self.parser = ChipParser(sort_junctions=self.settings.topology.sort_junctions)

    @property
    def via_style(self) -> ViaStyle:
        return ViaStyle(self.settings.output.via_style)

    def load(self, input_path: Union[str, Path]) -> Chip:
        """Parse an input file; every net's tree is built while parsing."""
        return self.parser.load_chip(input_path, encoding=self.settings.output.encoding)

    def verify(self, chip: Chip) -> List[str]:
        """Advisory re-check that every net is still a single tree."""
        issues = []
        for net in chip.nets:
            net_logger = get_context_logger(__name__, net=net.name)
            if net.tree.is_tree():
                net_logger.debug(f"{len(net.tree)} junctions, {net.tree.link_count} links")
                continue
            reached = net.tree.reachable()
            net_logger.warning(f"{reached} of {len(net.tree)} junctions reachable")
            issues.append(
                f"{net.name}: {reached} of {len(net.tree)} junctions reachable, "
                f"{net.tree.link_count} links"
            )
        return issues

    def render(self, chip: Chip) -> str:
        """Route file text for a chip."""
        return format_routes(chip.nets, self.via_style, self.settings.output.write_header)

    def write(self, chip: Chip, output_path: Union[str, Path]) -> int:
        """Write a chip's nets to a route file; returns the number of route lines."""
        return write_routes(
            output_path, chip.nets, self.via_style,
            write_header=self.settings.output.write_header,
            encoding=self.settings.output.encoding
        )

    def emit(self, chip: Chip, stream: TextIO) -> int:
        """Write a chip's nets to an open text stream; returns the number of route lines."""
        return dump_routes(stream, chip.nets, self.via_style, self.settings.output.write_header)

    def run(self, input_path: Union[str, Path],
            output_path: Optional[Union[str, Path]] = None,
            stream: Optional[TextIO] = None) -> TopologyStatistics:
        """Full pipeline: parse, build, write, and report statistics.

        Output goes to ``output_path`` when given, else to ``stream`` when
        given; with neither, lines are only counted.
        """
        with memory_profiler() as memory, timing_context("topology run", logging.INFO) as total:
            with timing_context("parse") as parse:
                chip = self.load(input_path)
            memory.sample()

            self.verify(chip)

            if output_path is not None:
                line_count = self.write(chip, output_path)
            elif stream is not None:
                line_count = self.emit(chip, stream)
            else:
                line_count = len(route_lines(chip.nets, self.via_style))

        statistics = TopologyStatistics.from_nets(chip.nets)
        statistics.output_lines = line_count
        statistics.parse_time = parse["elapsed"]
        statistics.total_time = total["elapsed"]
        statistics.memory_peak = memory.peak_mb

        logger.info(
            f"Built {statistics.nets} nets: {statistics.junctions} junctions, "
            f"{statistics.links} links, {statistics.redundant_segments} redundant segments dropped"
        )
        return statistics
