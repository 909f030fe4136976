"""
Domain layer - entities, value objects and errors for DesaConnect.

IMPORT RULES:
- CANNOT import from: application, infrastructure, api
- Pure Python plus the standard library only
"""

__all__: list[str] = []
