from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from beacon_validator.models.messages import ValidationErrorType, ValidationMessage
from beacon_validator.models.metadata.documents import (
    BeaconConfigurationResponse,
    BeaconEntryTypesResponse,
    BeaconFilteringTermsResponse,
    BeaconInfoResponse,
    BeaconMapResponse,
    Endpoint,
    InformationalResponse,
)
from beacon_validator.models.metadata.kinds import METADATA_KINDS, MetadataKind
from beacon_validator.services.observer import ValidationErrorsCollector, ValidationObserver
from beacon_validator.services.schemas.registry import JsonSchema, SchemaRegistry
from beacon_validator.workers.fetcher import fetch_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetadataModel:
    """The metadata documents a Beacon published, as far as they could be read.

    Every document is optional: one that failed to load or to parse is
    ``None`` and the rest of the model stays usable.
    """

    info: BeaconInfoResponse | None = None
    map: BeaconMapResponse | None = None
    configuration: BeaconConfigurationResponse | None = None
    entry_types: BeaconEntryTypesResponse | None = None
    filtering_terms: BeaconFilteringTermsResponse | None = None

    # ------------------------------------------------------------------
    # Derived lookups
    # ------------------------------------------------------------------

    @property
    def api_version(self) -> str | None:
        if self.info is None or self.info.meta is None:
            return None
        return self.info.meta.api_version

    @property
    def endpoint_sets(self) -> dict[str, Endpoint]:
        if self.map is None or self.map.response is None:
            return {}
        return self.map.response.endpoint_sets or {}

    def schema_url(self, entity_type: str) -> str | None:
        """Return the schema declared for *entity_type*.

        A schema listed in ``/info`` ``meta.returnedSchemas`` wins over the
        ``defaultSchema`` of the ``/configuration`` entry type definition.
        """
        if self.info is not None and self.info.meta is not None:
            for returned in self.info.meta.returned_schemas or []:
                if returned.entity_type == entity_type and returned.schema_url:
                    return returned.schema_url

        if self.configuration is not None and self.configuration.response is not None:
            definition = (self.configuration.response.entry_types or {}).get(entity_type)
            if definition is not None and definition.default_schema is not None:
                return definition.default_schema.reference_to_schema_definition

        return None

    def load_schema(
        self,
        entity_type: str | None,
        observer: ValidationObserver,
        registry: SchemaRegistry,
    ) -> JsonSchema | None:
        """Download the schema of *entity_type*, or ``None`` when it has none."""
        if entity_type is None:
            return None
        return registry.load_schema(self.schema_url(entity_type), entity_type, observer)

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        base_url: str,
        observer: ValidationObserver,
        *,
        registry: SchemaRegistry | None = None,
    ) -> MetadataModel:
        """Fetch, validate and parse every metadata document of a Beacon.

        Usage::

            model = MetadataModel.load("https://beacon.example/api", observer)
        """
        registry = registry or SchemaRegistry()
        documents = {
            kind.value: _load_document(base_url, kind, observer, registry)
            for kind in METADATA_KINDS
        }
        model = cls(**documents)
        model._check_returned_schemas(observer, registry)
        return model

    def _check_returned_schemas(
        self, observer: ValidationObserver, registry: SchemaRegistry
    ) -> None:
        """Load every per-entity schema ``/info`` declares, reporting broken ones.

        Errors are reported at the position of the offending declaration so
        they can be told apart from the same schema failing during crawling.
        """
        if self.info is None or self.info.meta is None:
            return
        for i, returned in enumerate(self.info.meta.returned_schemas or []):
            collector = ValidationErrorsCollector()
            registry.load_schema(returned.schema_url, returned.entity_type, collector)
            for error in collector.errors:
                observer.error(error.relocate(f"/info/meta/returnedSchemas/{i}/schema"))


def _load_document(
    base_url: str,
    kind: MetadataKind,
    observer: ValidationObserver,
    registry: SchemaRegistry,
) -> InformationalResponse | None:
    definition = METADATA_KINDS[kind]
    endpoint = base_url.rstrip("/") + definition.path
    observer.message(f"loading metadata: {endpoint}")

    content = fetch_content(f"{endpoint}?limit=0", observer)
    if content is None:
        return None

    try:
        value = json.loads(content)
    except ValueError as exc:
        observer.error(
            ValidationMessage(
                type=ValidationErrorType.CONTENT_ERROR,
                location=endpoint,
                message=f"invalid JSON from {endpoint}: {exc}",
            )
        )
        return None

    for error in registry.validate(kind, value):
        observer.error(error)

    try:
        return definition.model.model_validate(value)
    except ValidationError as exc:
        logger.debug("Unable to parse %s metadata from %s: %s", kind.value, endpoint, exc)
    return None
