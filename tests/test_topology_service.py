"""Tests for the topology service, run statistics and the command line."""
import io
import json
from unittest.mock import patch

import pytest

from main import main
from routetree.application.services import TopologyService
from routetree.domain.models import Chip, Net, NetNode, NetTree, Pair, Point, Route, TopologyStatistics
from routetree.shared.configuration import ApplicationSettings


class TestTopologyStatistics:
    """Test statistics collection"""

    def test_counts_vias_and_pins(self):
        pins = {0: Pair(0, 0), 1: Pair(4, 3)}
        segments = [
            Route(Point(0, 0, 1), Point(0, 3, 1)),
            Route(Point(0, 3, 1), Point(0, 3, 2)),
            Route(Point(0, 3, 2), Point(4, 3, 2)),
        ]
        net = Net.build(0, 0, [0, 1], segments, pins.get)

        stats = TopologyStatistics.from_nets([net])
        assert stats.nets == 1
        assert stats.junctions == 3
        assert stats.pin_junctions == 2
        assert stats.links == 2
        assert stats.vias == 1
        assert stats.average_junctions_per_net == 3.0

    def test_empty(self):
        stats = TopologyStatistics.from_nets([])
        assert stats.average_junctions_per_net == 0.0
        assert stats.to_dict()["nets"] == 0


class TestTopologyService:
    """Test the parse, build and write pipeline"""

    def test_run_writes_output(self, sample_input_file, tmp_path):
        output = tmp_path / "case.out"
        stats = TopologyService().run(sample_input_file, output)

        assert stats.nets == 2
        assert stats.junctions == 5
        assert stats.pin_junctions == 5
        assert stats.links == 3
        assert stats.vias == 0
        assert stats.redundant_segments == 0
        assert stats.output_lines == 13
        assert stats.total_time >= stats.parse_time >= 0.0
        assert stats.memory_peak > 0.0
        assert output.read_text(encoding="utf-8").startswith("NumMovedCellInst 0\nNumRoutes 13\n")

    def test_run_without_output(self, sample_input_file):
        stats = TopologyService().run(sample_input_file)
        assert stats.output_lines == 13

    def test_run_to_stream(self, sample_input_file):
        service = TopologyService()
        buffer = io.StringIO()
        stats = service.run(sample_input_file, stream=buffer)

        assert stats.output_lines == 13
        assert buffer.getvalue() == service.render(service.load(sample_input_file))

    def test_settings_flow_into_pipeline(self, sample_input_file):
        settings = ApplicationSettings()
        settings.topology.sort_junctions = True
        settings.output.via_style = "segment"
        settings.output.write_header = False

        service = TopologyService(settings)
        assert service.parser.sort_junctions is True

        text = service.render(service.load(sample_input_file))
        lines = text.splitlines()
        assert len(lines) == 8
        assert all(len(line.split()) == 7 for line in lines)

    def test_verify_accepts_built_nets(self, sample_input_file):
        service = TopologyService()
        assert service.verify(service.load(sample_input_file)) == []

    def test_verify_reports_broken_tree(self):
        tree = NetTree([NetNode(Pair(0, 0), id=0), NetNode(Pair(0, 1), id=1)])
        chip = Chip(nets=[Net(0, 0, tree)])

        issues = TopologyService().verify(chip)
        assert len(issues) == 1
        assert issues[0].startswith("N1: 1 of 2 junctions reachable")


@patch('main.setup_logging')
class TestCommandLine:
    """Test the routetree command"""

    def test_writes_output_file(self, mock_logging, sample_input_file, tmp_path):
        output = tmp_path / "case.out"
        assert main([str(sample_input_file), "-o", str(output)]) == 0
        assert output.read_text(encoding="utf-8").splitlines()[1] == "NumRoutes 13"

    def test_prints_to_stdout(self, mock_logging, sample_input_file, capsys):
        assert main([str(sample_input_file)]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[:3] == ["NumMovedCellInst 0", "NumRoutes 13", "1 1 1 N1"]

    def test_stats_to_stderr(self, mock_logging, sample_input_file, capsys):
        assert main([str(sample_input_file), "--stats", "--no-header"]) == 0
        captured = capsys.readouterr()
        assert captured.out.splitlines()[0] == "1 1 1 N1"
        stats = json.loads(captured.err)
        assert stats["nets"] == 2
        assert stats["output_lines"] == 13

    def test_via_style_option(self, mock_logging, sample_input_file, capsys):
        assert main([str(sample_input_file), "--via-style", "segment"]) == 0
        assert capsys.readouterr().out.splitlines()[1] == "NumRoutes 8"

    def test_config_file(self, mock_logging, sample_input_file, tmp_path, capsys):
        config = tmp_path / "routetree.json"
        config.write_text(json.dumps({"output": {"write_header": False}}), encoding="utf-8")

        assert main([str(sample_input_file), "-c", str(config)]) == 0
        assert capsys.readouterr().out.splitlines()[0] == "1 1 1 N1"

    def test_stdout_run_verifies_trees(self, mock_logging, sample_input_file, capsys):
        with patch.object(TopologyService, "verify", return_value=[]) as verify:
            assert main([str(sample_input_file)]) == 0
        verify.assert_called_once()
        assert capsys.readouterr().out.splitlines()[1] == "NumRoutes 13"

    def test_missing_config_file_fails(self, mock_logging, sample_input_file, tmp_path, capsys):
        assert main([str(sample_input_file), "-c", str(tmp_path / "absent.json")]) == 1
        assert capsys.readouterr().out == ""
        mock_logging.assert_not_called()

    def test_no_default_config_written(self, mock_logging, sample_input_file, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main([str(sample_input_file), "-o", str(tmp_path / "case.out")]) == 0
        assert not (tmp_path / "routetree.json").exists()

    def test_invalid_config_fails(self, mock_logging, sample_input_file, tmp_path):
        config = tmp_path / "routetree.json"
        config.write_text(json.dumps({"output": {"via_style": "diagonal"}}), encoding="utf-8")
        assert main([str(sample_input_file), "-c", str(config)]) == 1

    def test_missing_input(self, mock_logging, tmp_path):
        assert main([str(tmp_path / "missing.txt")]) == 2

    def test_malformed_input(self, mock_logging, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("MaxCellMove 1\nBogus 1\n", encoding="utf-8")
        assert main([str(path)]) == 1

    def test_version(self, mock_logging, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "routetree 1.0.0" in capsys.readouterr().out
