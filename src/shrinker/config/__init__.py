"""Configuration: settings and logging setup for the CLI and embedders."""
