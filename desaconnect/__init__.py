"""
DesaConnect - citizen complaint submission and tracking service.

Citizens file reports and follow them by reference code; village
administrators triage, annotate and resolve them from the back office.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
