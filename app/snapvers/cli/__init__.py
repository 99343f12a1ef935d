"""Command line interface for snapvers."""
