"""Infrastructure layer: tool execution, JDK queries, filesystem, downloads.

This layer may import from domain but never from services or the CLI.
"""
