from __future__ import annotations

import copy
from typing import Any

import httpx
import pytest
import respx

import beacon_validator.workers.fetcher as fetcher_module
from beacon_validator.services.observer import ValidationErrorsCollector
from beacon_validator.services.schemas.registry import SchemaRegistry
from factories import (
    BASE_URL,
    BIOSAMPLE_SCHEMA,
    BIOSAMPLE_SCHEMA_URL,
    INDIVIDUAL_SCHEMA,
    INDIVIDUAL_SCHEMA_URL,
    METADATA_DOCUMENTS,
)


@pytest.fixture(autouse=True)
def reset_http_client():
    """Give every test a fresh shared client so respx intercepts it."""
    fetcher_module._http_client = None
    yield
    fetcher_module.close_http_client()
    fetcher_module._http_client = None


@pytest.fixture(scope="session")
def registry() -> SchemaRegistry:
    return SchemaRegistry()


@pytest.fixture
def collector() -> ValidationErrorsCollector:
    return ValidationErrorsCollector()


@pytest.fixture
def metadata_documents() -> dict[str, Any]:
    """Metadata served by the fake Beacon; tests may edit it before loading.

    A value may also be an ``httpx.Response`` to serve that response as-is.
    """
    return copy.deepcopy(METADATA_DOCUMENTS)


@pytest.fixture
def beacon_api(metadata_documents):
    """respx router serving the metadata documents and the entity schemas.

    Query endpoints are left to the individual tests.
    """

    def _serve(name: str):
        def _side_effect(request: httpx.Request) -> httpx.Response:
            document = metadata_documents[name]
            if isinstance(document, httpx.Response):
                return document
            return httpx.Response(200, json=document)

        return _side_effect

    with respx.mock(assert_all_called=False) as router:
        for name in METADATA_DOCUMENTS:
            router.get(f"{BASE_URL}/{name}", name=name).mock(side_effect=_serve(name))
        router.get(INDIVIDUAL_SCHEMA_URL, name="individual_schema").mock(
            return_value=httpx.Response(200, json=INDIVIDUAL_SCHEMA)
        )
        router.get(BIOSAMPLE_SCHEMA_URL, name="biosample_schema").mock(
            return_value=httpx.Response(200, json=BIOSAMPLE_SCHEMA)
        )
        yield router
