"""Command line entrypoint and composition root."""
