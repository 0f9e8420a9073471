"""Task board API: validated task CRUD over a snapshot-persisted store."""

__version__ = "1.0.0"
