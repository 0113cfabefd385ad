"""Helper utilities for sqlite-glance completions."""
