"""Domain layer: launcher configuration, artifacts, and the error taxonomy."""
