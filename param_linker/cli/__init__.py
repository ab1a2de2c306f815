"""Command-line host for the parameter-file association engine."""
