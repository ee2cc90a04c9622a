"""Domain layer: value classification, candidate streams, and rules.

This layer depends only on stdlib and pydantic.
It must never import from the registry, plugins, config, or the CLI.
"""
