"""Shared helpers: console output and YAML persistence."""
