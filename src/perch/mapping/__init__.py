"""Mapping pipeline: load files, merge fragments, build metadata."""
