"""Definition parsing, prose detection and link rewriting engine."""
