"""
API layer - FastAPI routes and HTTP concerns for DesaConnect.

This layer contains:
- FastAPI route definitions
- Request/Response DTOs
- The admin route guard
- HTTP middleware

IMPORT RULES:
- CAN import from: application, domain, bootstrap
- CANNOT import from: infrastructure directly
- Uses dependency injection for infrastructure adapters
"""

__all__: list[str] = []
