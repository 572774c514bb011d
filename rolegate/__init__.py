"""rolegate command-line interface."""
