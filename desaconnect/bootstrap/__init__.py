"""Dependency wiring for DesaConnect."""
