"""Consolidates call transcripts and email threads into per-customer documents."""

__version__ = "0.1.0"
