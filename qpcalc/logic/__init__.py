"""Core business logic layer.

Subpackages:
- units: static unit catalog
- conversion: base-unit conversion and display-unit ladders
- rates: rate derivation and price/quantity calculations
"""
__all__ = ["units", "conversion", "rates"]
