import logging

import numpy as np
import pytest

from routetree.domain.models import Chip, Direction, Layer, Pair
from routetree.shared.configuration import LoggingSettings
from routetree.shared.exceptions import ValidationError
from routetree.shared.utils import (
    get_context_logger, memory_profiler, memory_usage_mb, setup_logging, timing_context,
    validate_count, validate_grid_position, validate_layer_index, validate_non_negative_number
)


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest left it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestValidation:
    """Test input validation helpers"""

    def test_grid_position(self):
        validate_grid_position(1, 1, (1, 1, 3, 3))
        validate_grid_position(3, 3, (1, 1, 3, 3))
        with pytest.raises(ValidationError) as exc_info:
            validate_grid_position(0, 2, (1, 1, 3, 3))
        assert exc_info.value.field == "row"
        with pytest.raises(ValidationError) as exc_info:
            validate_grid_position(2, 4, (1, 1, 3, 3))
        assert exc_info.value.field == "col"

    def test_layer_index(self):
        validate_layer_index(0, 2)
        for bad in (-1, 2, 1.5):
            with pytest.raises(ValidationError):
                validate_layer_index(bad, 2)

    def test_non_negative_number(self):
        validate_non_negative_number(0, "count")
        with pytest.raises(ValidationError):
            validate_non_negative_number(-3, "count")
        with pytest.raises(ValidationError):
            validate_non_negative_number("3", "count")

    def test_count(self):
        validate_count(2, 2, "layers")
        with pytest.raises(ValidationError, match="Expected 3 layers, found 2"):
            validate_count(2, 3, "layers")


class TestCapacityGrid:
    """Test per-layer capacity arrays"""

    def test_uniform_supply(self):
        layer = Layer.with_supply(0, Direction.HORIZONTAL, Pair(3, 2), 6)
        assert layer.capacity.dtype == np.int64
        assert layer.total_capacity == 36
        assert layer.get_capacity(2, 1) == 6
        assert layer.get_capacity(3, 0) is None

    def test_adjust_in_file_coordinates(self):
        chip = Chip(boundary=(2, 5, 4, 6))
        chip.layers.append(Layer.with_supply(0, Direction.VERTICAL, chip.dim, 4))

        assert chip.dim == Pair(3, 2)
        assert chip.adjust_capacity(2, 5, 0, -4)
        assert chip.get_capacity(2, 5, 0) == 0
        assert chip.layers[0].capacity[0, 0] == 0
        assert not chip.adjust_capacity(1, 5, 0, 1)
        assert not chip.adjust_capacity(2, 5, 3, 1)

    def test_layers_compare_without_capacity(self):
        a = Layer.with_supply(0, Direction.HORIZONTAL, Pair(2, 2), 1)
        b = Layer.with_supply(0, Direction.HORIZONTAL, Pair(2, 2), 9)
        assert a == b
        assert Layer(1, Direction.VERTICAL, Pair(2, 3)).total_capacity == 0


class TestPerformance:
    """Test timing and memory helpers"""

    def test_timing_context(self):
        with timing_context("block") as timing:
            sum(range(1000))
        assert timing["elapsed"] > 0.0

    def test_memory_profiler(self):
        with memory_profiler() as profiler:
            data = [0] * 100000
            profiler.sample()
        assert len(data) == 100000
        assert profiler.peak_mb >= profiler.start_mb > 0.0
        assert memory_usage_mb() > 0.0


class TestLogging:
    """Test logging setup"""

    def test_console_handler_on_stderr(self, restore_root_logger):
        setup_logging(LoggingSettings(level="DEBUG"))
        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_file_handler(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        settings = LoggingSettings(console_output=False, file_output=True, log_file=str(log_file))
        setup_logging(settings)

        logging.getLogger("routetree.test").warning("written to file")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")
        for handler in restore_root_logger.handlers:
            handler.close()

    def test_component_levels(self, restore_root_logger):
        setup_logging(LoggingSettings(component_levels={"routetree.quiet": "ERROR"}))
        assert logging.getLogger("routetree.quiet").level == logging.ERROR
        logging.getLogger("routetree.quiet").setLevel(logging.NOTSET)

    def test_context_logger_prefix(self, caplog):
        net_logger = get_context_logger("routetree.test", net="N3")
        with caplog.at_level(logging.WARNING, logger="routetree.test"):
            net_logger.warning("not a tree")
        assert "[net=N3] not a tree" in caplog.text
