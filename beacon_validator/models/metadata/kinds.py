"""The fixed set of Beacon metadata documents.

Adding a metadata kind:
    1. Add a member to ``MetadataKind``.
    2. Add its row to ``METADATA_KINDS`` (endpoint path, bundled schema
       file, target model).
    3. Drop the schema file into ``beacon_validator/resources/schemas``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from beacon_validator.models.metadata.documents import (
    BeaconConfigurationResponse,
    BeaconEntryTypesResponse,
    BeaconFilteringTermsResponse,
    BeaconInfoResponse,
    BeaconMapResponse,
    InformationalResponse,
)


class MetadataKind(str, Enum):
    INFO = "info"
    MAP = "map"
    CONFIGURATION = "configuration"
    ENTRY_TYPES = "entry_types"
    FILTERING_TERMS = "filtering_terms"


@dataclass(frozen=True)
class MetadataKindDefinition:
    path: str
    schema: str
    model: type[InformationalResponse]


#: Declaration order is the order documents are loaded in.
METADATA_KINDS: dict[MetadataKind, MetadataKindDefinition] = {
    MetadataKind.INFO: MetadataKindDefinition(
        "/info", "beaconInfoResponse.json", BeaconInfoResponse
    ),
    MetadataKind.MAP: MetadataKindDefinition(
        "/map", "beaconMapResponse.json", BeaconMapResponse
    ),
    MetadataKind.CONFIGURATION: MetadataKindDefinition(
        "/configuration",
        "beaconConfigurationResponse.json",
        BeaconConfigurationResponse,
    ),
    MetadataKind.ENTRY_TYPES: MetadataKindDefinition(
        "/entry_types", "beaconEntryTypesResponse.json", BeaconEntryTypesResponse
    ),
    MetadataKind.FILTERING_TERMS: MetadataKindDefinition(
        "/filtering_terms",
        "beaconFilteringTermsResponse.json",
        BeaconFilteringTermsResponse,
    ),
}

#: Generic envelope every query endpoint (resultSets or collections) returns.
BEACON_RESPONSE_SCHEMA = "beaconResponse.json"
