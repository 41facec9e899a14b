"""Settings dataclasses for routetree."""
from dataclasses import dataclass, field
from typing import Dict, List

from ... import __version__

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VIA_STYLES = ("split", "segment")


@dataclass
class TopologySettings:
    """Junction tree construction settings."""
    sort_junctions: bool = False  # order junctions by position for reproducible output

    def validate(self) -> List[str]:
        errors = []
        if not isinstance(self.sort_junctions, bool):
            errors.append(f"sort_junctions must be a boolean, got {self.sort_junctions!r}")
        return errors


@dataclass
class OutputSettings:
    """Route file output settings."""
    via_style: str = "split"
    write_header: bool = True  # NumMovedCellInst / NumRoutes preamble
    encoding: str = "utf-8"

    def validate(self) -> List[str]:
        errors = []
        if self.via_style not in VIA_STYLES:
            errors.append(f"via_style must be one of {VIA_STYLES}, got {self.via_style!r}")
        if not self.encoding:
            errors.append("encoding cannot be empty")
        return errors


@dataclass
class LoggingSettings:
    """Logging settings."""
    level: str = "INFO"
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    console_output: bool = True
    file_output: bool = False
    log_file: str = "logs/routetree.log"
    max_file_size_mb: int = 10
    backup_count: int = 3
    component_levels: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> List[str]:
        errors = []
        if self.level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid log level: {self.level}")
        for component, level in self.component_levels.items():
            if level.upper() not in LOG_LEVELS:
                errors.append(f"Invalid log level for {component}: {level}")
        if self.max_file_size_mb <= 0:
            errors.append("max_file_size_mb must be positive")
        if self.backup_count < 0:
            errors.append("backup_count must be non-negative")
        return errors


@dataclass
class ApplicationSettings:
    """Top-level application settings."""
    version: str = __version__
    config_version: int = 1
    topology: TopologySettings = field(default_factory=TopologySettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def validate(self) -> Dict[str, List[str]]:
        """Validate every category; returns category -> list of errors."""
        return {
            "topology": self.topology.validate(),
            "output": self.output.validate(),
            "logging": self.logging.validate(),
        }
