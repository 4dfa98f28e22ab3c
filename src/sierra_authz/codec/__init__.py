"""
sierra_authz.codec

Wire-format helpers for document snapshots.

Responsibilities:
- Convert Firestore REST typed values to and from plain Python values.
"""

# Package marker; import codecs directly from submodules.
