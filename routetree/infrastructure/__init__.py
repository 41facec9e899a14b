"""Infrastructure layer: file parsing and output writing."""
