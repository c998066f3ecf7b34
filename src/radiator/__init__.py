"""radiator -- CI status radiator."""

__version__ = "0.1.0"
