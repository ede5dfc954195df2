"""Beacon query responses.

A query endpoint answers with one of two envelopes, told apart by the
presence of a ``collections`` key inside ``response``.  Entries are kept
as plain JSON objects: their shape is only known through the per-entity
schema, never through a Python class.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import Discriminator, Tag, TypeAdapter

from beacon_validator.models.metadata.documents import BeaconModel

JsonObject = dict[str, Any]


class BeaconResultset(BeaconModel):
    id: str | None = None
    set_type: str | None = None
    exists: bool | None = None
    results_count: int | None = None
    results: list[JsonObject] | None = None


class BeaconResultsets(BeaconModel):
    result_sets: list[BeaconResultset] | None = None


class BeaconCollections(BeaconModel):
    collections: list[JsonObject] | None = None


class BeaconResultsetsResponse(BeaconModel):
    meta: JsonObject | None = None
    response: BeaconResultsets

    def entries(self) -> list[JsonObject]:
        entries: list[JsonObject] = []
        for resultset in self.response.result_sets or []:
            entries.extend(resultset.results or [])
        return entries


class BeaconCollectionsResponse(BeaconModel):
    meta: JsonObject | None = None
    response: BeaconCollections

    def entries(self) -> list[JsonObject]:
        return list(self.response.collections or [])


def _response_kind(value: Any) -> str | None:
    if isinstance(value, dict):
        response = value.get("response")
    else:
        response = getattr(value, "response", None)
    if isinstance(response, dict):
        return "collections" if "collections" in response else "resultSets"
    if isinstance(response, BeaconCollections):
        return "collections"
    if isinstance(response, BeaconResultsets):
        return "resultSets"
    return None


BeaconResponse = Annotated[
    Union[
        Annotated[BeaconResultsetsResponse, Tag("resultSets")],
        Annotated[BeaconCollectionsResponse, Tag("collections")],
    ],
    Discriminator(_response_kind),
]

_BEACON_RESPONSE = TypeAdapter(BeaconResponse)


def parse_beacon_response(value: Any) -> BeaconResultsetsResponse | BeaconCollectionsResponse:
    """Decode a parsed JSON envelope into its response variant.

    Raises:
        pydantic.ValidationError: when ``response`` is missing or malformed.
    """
    return _BEACON_RESPONSE.validate_python(value)
