"""Packaged JSON schemas for result and cluster health artifacts."""
