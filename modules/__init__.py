"""Pluggable business modules discovered by core.registry.ModuleLoader."""
