"""Grouped, deduplicated reports over vector-search code hits."""
