"""Command-line interface for configstore."""
