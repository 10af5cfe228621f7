"""Snapshot ingestion.

This package discovers and decodes gzip station status snapshots
and drives the end-to-end conversion pipeline.
"""
