"""Data access layer for the currency converter.

This module provides the currency models, the rates feed ingestion and the
repository that persists the feed snapshot to disk.
"""
