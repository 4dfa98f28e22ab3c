"""
sierra_authz.auth

Authentication package.

Responsibilities:
- JWT helpers and validation.
- Custom-claims normalization into the engine's `Principal`.
- FastAPI auth dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Authorization decisions live in `sierra_authz.engine`; this package only establishes identity.
