"""Graph algorithms used by topology construction."""
from .union_find import UnionFind

__all__ = ['UnionFind']
