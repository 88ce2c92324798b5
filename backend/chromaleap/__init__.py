"""ChromaLeap Analyst: editing pipeline reverse engineering service."""

__version__ = "1.0.0"
