"""kitn registry tooling — build, validate and stage the component registry."""

__version__ = "0.1.0"
