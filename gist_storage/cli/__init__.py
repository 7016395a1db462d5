"""Command-line interface (gist-storage)."""
