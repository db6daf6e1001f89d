"""Course Catalog - provider course listings with upsert reconciliation and search."""

__version__ = "0.1.0"
