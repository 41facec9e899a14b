"""Shared utilities."""
from .logging_utils import setup_logging, get_logger, get_context_logger
from .validation_utils import (
    validate_grid_position, validate_layer_index, validate_non_negative_number, validate_count
)
from .performance_utils import timing_context, memory_profiler, memory_usage_mb

__all__ = [
    'setup_logging', 'get_logger', 'get_context_logger',
    'validate_grid_position', 'validate_layer_index', 'validate_non_negative_number', 'validate_count',
    'timing_context', 'memory_profiler', 'memory_usage_mb'
]
