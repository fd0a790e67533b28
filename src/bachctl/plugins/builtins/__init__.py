"""Plugins shipped with bachctl."""
