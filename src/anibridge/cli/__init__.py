"""AniBridge command-line interface."""
