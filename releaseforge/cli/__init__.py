"""Command line interface for ReleaseForge."""
