"""Typed shapes of the Beacon v2 informational (metadata) responses.

Only the parts the validator navigates are declared, and all of them are
optional: a missing field leaves that attribute ``None`` and the rest of the
document usable.  Schema violations are reported separately.  Every model
keeps unknown keys.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BeaconModel(BaseModel):
    """Base for all Beacon payload models (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------


class SchemaPerEntity(BeaconModel):
    entity_type: str | None = None
    schema_url: str | None = Field(default=None, alias="schema")


class InformationalResponseMeta(BeaconModel):
    beacon_id: str | None = None
    api_version: str | None = None
    returned_schemas: list[SchemaPerEntity] | None = None


class InformationalResponse(BeaconModel):
    meta: InformationalResponseMeta | None = None


class SchemaReference(BeaconModel):
    id: str | None = None
    name: str | None = None
    reference_to_schema_definition: str | None = None
    schema_version: str | None = None


class EntryTypeDefinition(BeaconModel):
    id: str | None = None
    name: str | None = None
    part_of_specification: str | None = None
    default_schema: SchemaReference | None = None


# ---------------------------------------------------------------------------
# /info
# ---------------------------------------------------------------------------


class BeaconInfo(BeaconModel):
    id: str | None = None
    name: str | None = None
    api_version: str | None = None
    environment: str | None = None


class BeaconInfoResponse(InformationalResponse):
    response: BeaconInfo | None = None


# ---------------------------------------------------------------------------
# /map
# ---------------------------------------------------------------------------


class RelatedEndpoint(BeaconModel):
    returned_entry_type: str | None = None
    url: str | None = None


class Endpoint(BeaconModel):
    entry_type: str | None = None
    root_url: str | None = None
    single_entry_url: str | None = None
    filtering_terms_url: str | None = None
    endpoints: dict[str, RelatedEndpoint] | None = None


class BeaconMap(BeaconModel):
    endpoint_sets: dict[str, Endpoint] | None = None


class BeaconMapResponse(InformationalResponse):
    response: BeaconMap | None = None


# ---------------------------------------------------------------------------
# /configuration
# ---------------------------------------------------------------------------


class BeaconConfiguration(BeaconModel):
    maturity_attributes: dict[str, Any] | None = None
    entry_types: dict[str, EntryTypeDefinition] | None = None


class BeaconConfigurationResponse(InformationalResponse):
    response: BeaconConfiguration | None = None


# ---------------------------------------------------------------------------
# /entry_types
# ---------------------------------------------------------------------------


class BeaconEntryTypes(BeaconModel):
    entry_types: dict[str, EntryTypeDefinition] | None = None


class BeaconEntryTypesResponse(InformationalResponse):
    response: BeaconEntryTypes | None = None


# ---------------------------------------------------------------------------
# /filtering_terms
# ---------------------------------------------------------------------------


class BeaconFilteringTerms(BeaconModel):
    filtering_terms: list[dict[str, Any]] | None = None
    resources: list[dict[str, Any]] | None = None


class BeaconFilteringTermsResponse(InformationalResponse):
    response: BeaconFilteringTerms | None = None
