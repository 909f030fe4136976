"""Adapters binding application ports to real backends."""
