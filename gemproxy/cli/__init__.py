"""Command line interface for gemproxy."""
