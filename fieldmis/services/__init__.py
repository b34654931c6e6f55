"""Report services: reconciliation, KPI aggregation and orchestration."""
