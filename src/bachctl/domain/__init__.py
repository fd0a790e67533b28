"""Domain layer: command lines, module descriptors, and error types.

This layer depends only on the standard library.
It must never import from services, infrastructure, plugins, or config.
"""
