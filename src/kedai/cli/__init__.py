"""Command line interface for kedai."""
