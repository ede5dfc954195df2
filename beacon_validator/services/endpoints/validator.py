"""Crawler validating the query endpoints declared in a Beacon map.

For every entry type in ``/map`` the root endpoint is queried for a single
record.  That record then fills the URL templates of the single-entry
endpoint and of the related endpoints, which are queried once each.  The
walk never goes deeper than those related endpoints.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from beacon_validator.core.config import settings
from beacon_validator.models.messages import ValidationErrorType, ValidationMessage
from beacon_validator.models.metadata.documents import Endpoint
from beacon_validator.models.responses import (
    BeaconCollectionsResponse,
    BeaconResultsetsResponse,
    JsonObject,
    parse_beacon_response,
)
from beacon_validator.services.metadata.model import MetadataModel
from beacon_validator.services.observer import ValidationObserver
from beacon_validator.services.schemas.registry import JsonSchema, SchemaRegistry
from beacon_validator.services.templates import has_placeholders, resolve, resolve_base
from beacon_validator.workers.fetcher import fetch_content

logger = logging.getLogger(__name__)

BeaconResponse = BeaconResultsetsResponse | BeaconCollectionsResponse


def build_dummy_request(api_version: str | None) -> dict[str, Any]:
    """The minimal query used to ask an endpoint for one sample record."""
    return {
        "meta": {"apiVersion": api_version or settings.default_api_version},
        "query": {
            "testMode": True,
            "requestedGranularity": "record",
            "pagination": {"skip": 0, "limit": 1},
        },
    }


def select_entry(
    entries: list[JsonObject],
    schema: JsonSchema | None,
    observer: ValidationObserver,
) -> JsonObject | None:
    """Pick the representative entry of a response.

    With a schema, every entry is validated and the first valid one is
    kept; all errors are reported.  Without a schema, or when no entry is
    valid, the first entry is used.  ``None`` only for an empty list.
    """
    selected: JsonObject | None = None
    if schema is not None:
        for entry in entries:
            errors = schema.validate(entry)
            for error in errors:
                observer.error(error)
            if not errors and selected is None:
                selected = entry

    if selected is None and entries:
        selected = entries[0]
    return selected


class EndpointValidator:
    """Validates every endpoint set of a loaded ``MetadataModel``."""

    def __init__(
        self,
        model: MetadataModel,
        registry: SchemaRegistry | None = None,
    ) -> None:
        self._model = model
        self._registry = registry or SchemaRegistry()
        self._dummy_request = build_dummy_request(model.api_version)

    def validate(self, base_url: str, observer: ValidationObserver) -> None:
        """Validate the endpoints of every entry type declared in the map."""
        for name, endpoint in self._model.endpoint_sets.items():
            self._validate_endpoint_set(base_url, name, endpoint, observer)

    # ------------------------------------------------------------------
    # Per entry type
    # ------------------------------------------------------------------

    def _validate_endpoint_set(
        self,
        base_url: str,
        name: str,
        endpoint: Endpoint,
        observer: ValidationObserver,
    ) -> None:
        observer.message(f"validate endpoints: [{name}] {base_url}")

        if endpoint.root_url is None:
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    location=base_url,
                    message="no 'root' endpoint found.",
                )
            )
            return

        root_url = resolve_base(base_url, endpoint.root_url)
        if root_url is None:
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    location=base_url,
                    message=f"invalid 'root' endpoint: {endpoint.root_url}",
                )
            )
            return

        response = self._validate_entry_endpoint(root_url, observer)
        if response is None:
            return

        entry_type = endpoint.entry_type or name
        entry = self._validate_response(response, entry_type, observer)
        if entry is None:
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    location=base_url,
                    message=(
                        f"unable to resolve [{name}] identifier, "
                        f"as {root_url} returned no 'results'"
                    ),
                )
            )
            return

        self._validate_linked_endpoint(
            root_url, endpoint.single_entry_url, entry_type, entry, observer
        )
        for related in (endpoint.endpoints or {}).values():
            self._validate_linked_endpoint(
                root_url, related.url, related.returned_entry_type, entry, observer
            )

    def _validate_linked_endpoint(
        self,
        root_url: str,
        template: str | None,
        entry_type: str | None,
        entry: JsonObject,
        observer: ValidationObserver,
    ) -> None:
        """Query a templated endpoint for *entry*; a leaf of the walk."""
        if template is None:
            return

        resolved = resolve_base(root_url, template)
        if resolved is None:
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    location=root_url,
                    message=f"invalid endpoint: {template}",
                )
            )
            return

        url = resolve(resolved, entry)
        if has_placeholders(url):
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    location=url,
                    message="can't resolve identifier",
                )
            )
            return

        response = self._validate_entry_endpoint(url, observer)
        if response is not None:
            self._validate_response(response, entry_type, observer)

    # ------------------------------------------------------------------
    # Single request
    # ------------------------------------------------------------------

    def _validate_entry_endpoint(
        self, url: str, observer: ValidationObserver
    ) -> BeaconResponse | None:
        """POST the dummy query to *url* and validate the response envelope."""
        observer.message(f"  validate endpoint: {url}")

        content = fetch_content(url, observer, body=self._dummy_request)
        if content is None:
            return None

        try:
            value = json.loads(content)
            for error in self._registry.validate_response(value):
                observer.error(error)
            return parse_beacon_response(value)
        except (ValueError, ValidationError) as exc:
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    location=url,
                    message=str(exc),
                )
            )
        return None

    def _validate_response(
        self,
        response: BeaconResponse,
        entry_type: str | None,
        observer: ValidationObserver,
    ) -> JsonObject | None:
        schema = self._model.load_schema(entry_type, observer, self._registry)
        return select_entry(response.entries(), schema, observer)
