"""Command line interface for deflink."""
