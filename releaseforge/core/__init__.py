"""Core layer: logging, configuration, errors and the versioning engine."""
