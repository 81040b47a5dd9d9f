"""Matching — URL decomposition and all-or-nothing binding into records."""
