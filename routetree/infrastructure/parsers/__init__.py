"""Input file parsers."""
from .chip_parser import ChipParser

__all__ = ['ChipParser']
