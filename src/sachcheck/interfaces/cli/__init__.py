"""Rich command-line interface."""
