"""
sierra_authz.catalog

Collection schema catalog.

Responsibilities:
- Provide the built-in schemas for client-writable Sierra Painting collections.
- Load an optional JSON override file (validated with Pydantic).
- Resolve a collection name to its schema; unmapped collections resolve to None.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sierra_authz.engine.models import CollectionSchema, FieldType


class SchemaCatalogError(Exception):
    pass


_T = FieldType

# Collections written only by backend functions (payments, leads, auditLog) are
# intentionally absent: clients get default deny for them.
BUILTIN_SCHEMAS: dict[str, CollectionSchema] = {
    "jobs": CollectionSchema(
        required_fields=frozenset({"orgId", "ownerId", "status"}),
        field_types={
            "orgId": _T.string,
            "ownerId": _T.string,
            "status": _T.string,
            "title": _T.string,
            "address": _T.string,
            "geofence": _T.map,
            "createdAt": _T.timestamp,
            "updatedAt": _T.timestamp,
        },
        server_controlled_fields=frozenset({"updatedAt"}),
        immutable_fields=frozenset({"ownerId", "orgId"}),
    ),
    "timeEntries": CollectionSchema(
        required_fields=frozenset({"companyId", "userId", "jobId", "clockInAt"}),
        field_types={
            "companyId": _T.string,
            "userId": _T.string,
            "jobId": _T.string,
            "clockInAt": _T.timestamp,
            "clockOutAt": _T.timestamp,
            "clockInLocation": _T.map,
            "clockOutLocation": _T.map,
            "clockInGeofenceValid": _T.boolean,
            "clockOutGeofenceValid": _T.boolean,
            "notes": _T.string,
            "updatedAt": _T.timestamp,
        },
        server_controlled_fields=frozenset({"updatedAt"}),
        immutable_fields=frozenset({"companyId", "userId", "jobId"}),
        owner_field="userId",
        org_field="companyId",
    ),
    "estimates": CollectionSchema(
        required_fields=frozenset({"companyId", "createdBy", "customerId", "status", "amount"}),
        field_types={
            "companyId": _T.string,
            "createdBy": _T.string,
            "customerId": _T.string,
            "status": _T.string,
            "amount": _T.number,
            "items": _T.array,
            "validUntil": _T.timestamp,
            "updatedAt": _T.timestamp,
        },
        server_controlled_fields=frozenset({"updatedAt"}),
        immutable_fields=frozenset({"companyId", "createdBy"}),
        owner_field="createdBy",
        org_field="companyId",
    ),
    "invoices": CollectionSchema(
        required_fields=frozenset({"companyId", "createdBy", "customerId", "status", "amount"}),
        field_types={
            "companyId": _T.string,
            "createdBy": _T.string,
            "customerId": _T.string,
            "status": _T.string,
            "amount": _T.number,
            "items": _T.array,
            "dueDate": _T.timestamp,
            "updatedAt": _T.timestamp,
        },
        server_controlled_fields=frozenset({"updatedAt"}),
        immutable_fields=frozenset({"companyId", "createdBy"}),
        owner_field="createdBy",
        org_field="companyId",
    ),
    "users": CollectionSchema(
        required_fields=frozenset({"uid", "companyId"}),
        field_types={
            "uid": _T.string,
            "companyId": _T.string,
            "name": _T.string,
            "email": _T.string,
            "role": _T.string,
            "roleUpdatedAt": _T.timestamp,
        },
        server_controlled_fields=frozenset({"roleUpdatedAt"}),
        # Role changes go through the claims tooling, never a profile write.
        immutable_fields=frozenset({"uid", "companyId", "role"}),
        owner_field="uid",
        org_field="companyId",
    ),
}


class _SchemaFileEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    required_fields: list[str] = Field(default_factory=list, alias="requiredFields")
    field_types: dict[str, FieldType] = Field(default_factory=dict, alias="fieldTypes")
    server_controlled_fields: list[str] = Field(default_factory=list, alias="serverControlledFields")
    immutable_fields: list[str] = Field(default_factory=list, alias="immutableFields")
    owner_field: str = Field(default="ownerId", alias="ownerField")
    org_field: str = Field(default="orgId", alias="orgField")

    def to_schema(self) -> CollectionSchema:
        return CollectionSchema(
            required_fields=frozenset(self.required_fields),
            field_types=dict(self.field_types),
            server_controlled_fields=frozenset(self.server_controlled_fields),
            immutable_fields=frozenset(self.immutable_fields),
            owner_field=self.owner_field,
            org_field=self.org_field,
        )


class _SchemaFile(BaseModel):
    collections: dict[str, _SchemaFileEntry]


class SchemaCatalog:
    def __init__(self, schemas: Mapping[str, CollectionSchema]) -> None:
        self._schemas = dict(schemas)

    def get(self, collection: str) -> CollectionSchema | None:
        return self._schemas.get(collection)

    def collections(self) -> Iterable[str]:
        return sorted(self._schemas)

    @classmethod
    def builtin(cls) -> SchemaCatalog:
        return cls(BUILTIN_SCHEMAS)

    @classmethod
    def from_file(cls, path: str | Path) -> SchemaCatalog:
        """
        Load schemas from a JSON file shaped as:

            {"collections": {"jobs": {"requiredFields": [...], "fieldTypes": {"title": "string"}}}}

        The file replaces the built-in catalog entirely.
        """

        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaCatalogError(f"cannot read schema file {path}: {e}") from e
        try:
            parsed = _SchemaFile.model_validate_json(raw)
        except ValidationError as e:
            raise SchemaCatalogError(f"invalid schema file {path}: {e}") from e
        return cls({name: entry.to_schema() for name, entry in parsed.collections.items()})


def load_catalog(schemas_file: str | None) -> SchemaCatalog:
    if schemas_file:
        return SchemaCatalog.from_file(schemas_file)
    return SchemaCatalog.builtin()


# --- Module Notes -----------------------------------------------------------
# Field names mirror the documents the mobile app writes (camelCase), not Python naming.
