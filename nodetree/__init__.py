"""nodetree — lifecycle engine for file-backed configuration trees."""

__version__ = "0.1.0"
