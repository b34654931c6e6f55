"""CSV / XLSX export and console tables for report rows."""

from .writer import ExportError, feed_to_frame, render_table, rows_to_frame, write_frame

__all__ = ["ExportError", "feed_to_frame", "render_table", "rows_to_frame", "write_frame"]
