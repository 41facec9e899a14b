"""Writer for routed net topologies.

Output layout::

    NumMovedCellInst 0
    NumRoutes <line count>
    <via and edge lines of every net>
"""
import io
import logging
from pathlib import Path
from typing import Iterable, List, TextIO, Union

from ...domain.models.net import Net, ViaStyle

logger = logging.getLogger(__name__)


def route_lines(nets: Iterable[Net], via_style: ViaStyle = ViaStyle.SPLIT) -> List[str]:
    """Serialized lines of every net, in net order."""
    lines: List[str] = []
    for net in nets:
        lines.extend(net.to_lines(via_style))
    return lines


def dump_routes(stream: TextIO, nets: Iterable[Net], via_style: ViaStyle = ViaStyle.SPLIT,
                write_header: bool = True) -> int:
    """Write nets to an open text stream.

    Returns:
        Number of route lines written (header excluded)
    """
    lines = route_lines(nets, via_style)
    if write_header:
        stream.write("NumMovedCellInst 0\n")
        stream.write(f"NumRoutes {len(lines)}\n")
    for line in lines:
        stream.write(f"{line}\n")
    return len(lines)


def format_routes(nets: Iterable[Net], via_style: ViaStyle = ViaStyle.SPLIT,
                  write_header: bool = True) -> str:
    """Render nets as route file text."""
    buffer = io.StringIO()
    dump_routes(buffer, nets, via_style, write_header)
    return buffer.getvalue()


def write_routes(file_path: Union[str, Path], nets: Iterable[Net],
                 via_style: ViaStyle = ViaStyle.SPLIT, write_header: bool = True,
                 encoding: str = "utf-8") -> int:
    """Write nets to a route file.

    Returns:
        Number of route lines written (header excluded)
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding=encoding) as f:
        count = dump_routes(f, nets, via_style, write_header)

    logger.info(f"Wrote {count} route lines to {path}")
    return count
