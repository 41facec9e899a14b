"""Application services."""
from .topology_service import TopologyService

__all__ = ['TopologyService']
