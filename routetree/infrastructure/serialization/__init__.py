"""Route output serialization."""
from .route_writer import dump_routes, format_routes, route_lines, write_routes

__all__ = ['dump_routes', 'format_routes', 'route_lines', 'write_routes']
