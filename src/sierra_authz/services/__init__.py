"""
sierra_authz.services

Service layer.

Responsibilities:
- Wrap the decision engine with logging and audit persistence.
"""

# Package marker.
