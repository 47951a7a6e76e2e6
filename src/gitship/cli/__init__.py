"""Command line interface for gitship."""
