"""
Infrastructure layer - adapters, stubs, observability and metrics.

IMPORT RULES:
- CAN import from: application, domain
- CANNOT import from: api
"""

__all__: list[str] = []
