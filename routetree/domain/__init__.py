"""Domain layer: routing topology models."""
