"""
sierra_authz

Authorization decision service for Sierra Painting document access.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
