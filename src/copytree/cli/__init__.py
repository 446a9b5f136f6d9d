"""Command-line interface for copytree."""
