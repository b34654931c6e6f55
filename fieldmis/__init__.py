"""Field-operations MIS feed ingestion and reconciliation."""

__version__ = "0.1.0"
