"""
sierra_authz.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories for the decision audit trail.
"""

# Package marker.
