"""Customer activity report aggregation, enrichment and export."""

__version__ = "0.1.0"
