"""JSON schemas the validator checks Beacon documents against.

Two families of schemas are involved:

- the framework schemas bundled with this package, one per metadata kind
  plus the generic query response envelope, loaded once at start-up;
- per-entity schemas a Beacon declares itself (in ``/info`` or
  ``/configuration``), downloaded each time they are needed.

Validation itself is delegated to ``jsonschema``; this module only turns
its errors into ``ValidationMessage`` values.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import httpx
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError
from jsonschema.validators import validator_for
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from beacon_validator.models.messages import ValidationErrorType, ValidationMessage
from beacon_validator.models.metadata.kinds import (
    BEACON_RESPONSE_SCHEMA,
    METADATA_KINDS,
    MetadataKind,
)
from beacon_validator.services.observer import ValidationErrorsCollector, ValidationObserver
from beacon_validator.workers.fetcher import fetch_content

logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).resolve().parent.parent.parent / "resources" / "schemas"


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def json_pointer(tokens: Iterable[Any]) -> str:
    """Render a sequence of keys / indexes as a JSON Pointer."""
    return "".join(f"/{_jp_escape(str(token))}" for token in tokens)


class JsonSchema:
    """A checked schema ready to validate JSON values.

    Raises:
        jsonschema.exceptions.SchemaError: if *contents* is not a valid schema.
    """

    def __init__(
        self,
        contents: Any,
        *,
        location: str,
        registry: Registry | None = None,
    ) -> None:
        if not isinstance(contents, (dict, bool)):
            raise SchemaError(f"{type(contents).__name__} is not a JSON schema")
        cls = validator_for(contents)
        cls.check_schema(contents)
        self.location = location
        if isinstance(contents, dict):
            self.location = contents.get("$id") or contents.get("id") or location
        if registry is None:
            self._validator = cls(contents)
        else:
            self._validator = cls(contents, registry=registry)

    def validate(self, value: Any) -> list[ValidationMessage]:
        """Return every violation of the schema by *value* (empty when valid)."""
        try:
            return [self._to_message(error) for error in self._validator.iter_errors(value)]
        except Unresolvable as exc:
            return [
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    location=self.location,
                    message=f"unresolvable schema reference: {exc}",
                )
            ]

    def _to_message(self, error: JsonSchemaValidationError) -> ValidationMessage:
        return ValidationMessage(
            type=ValidationErrorType.JSON_SCHEMA_ERROR,
            location=f"{self.location}#{json_pointer(error.absolute_schema_path)}",
            path=json_pointer(error.absolute_path),
            message=error.message,
        )


def _load_bundled(path: Path) -> JsonSchema | None:
    try:
        contents = json.loads(path.read_text(encoding="utf-8"))
        return JsonSchema(contents, location=path.name)
    except (OSError, ValueError, SchemaError) as exc:
        logger.error("Error loading schema %s: %s", path.name, exc)
    return None


def _retrieve(uri: str) -> Resource:
    """Download a remote ``$ref`` target for ``referencing``."""
    collector = ValidationErrorsCollector()
    content = fetch_content(uri, collector)
    if content is None:
        reason = collector.errors[0].message if collector.errors else uri
        raise LookupError(reason)
    return Resource.from_contents(json.loads(content), default_specification=DRAFT202012)


class SchemaRegistry:
    """Bundled framework schemas plus on-demand per-entity schemas."""

    def __init__(self, schemas_dir: Path = SCHEMAS_DIR) -> None:
        self._schemas: dict[MetadataKind, JsonSchema | None] = {
            kind: _load_bundled(schemas_dir / definition.schema)
            for kind, definition in METADATA_KINDS.items()
        }
        self.response_schema = _load_bundled(schemas_dir / BEACON_RESPONSE_SCHEMA)

    def validate(self, kind: MetadataKind, value: Any) -> list[ValidationMessage]:
        """Validate a metadata document; fails closed when its schema is missing."""
        schema = self._schemas.get(kind)
        if schema is None:
            return [
                ValidationMessage(
                    type=ValidationErrorType.JSON_SCHEMA_ERROR,
                    message="internal error: unresolved schema",
                )
            ]
        return schema.validate(value)

    def validate_response(self, value: Any) -> list[ValidationMessage]:
        """Validate a query response envelope (skipped if its schema failed to load)."""
        if self.response_schema is None:
            return []
        return self.response_schema.validate(value)

    def load_schema(
        self,
        url: str | None,
        entity_type: str | None,
        observer: ValidationObserver,
    ) -> JsonSchema | None:
        """Download and check the schema for *entity_type* published at *url*.

        Problems are reported to *observer* and yield ``None``.  Nothing is
        cached: every call downloads the schema again.
        """
        if url is None:
            return None

        try:
            target = httpx.URL(url)
        except httpx.InvalidURL:
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    message=f"malformed URL for the '{entity_type}' returned schema: '{url}'",
                )
            )
            return None
        if not target.is_absolute_url:
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    message=f"not absolute URL for the '{entity_type}' returned schema: '{url}'",
                )
            )
            return None

        content = fetch_content(url, observer)
        if content is None:
            return None

        try:
            contents = json.loads(content)
            if isinstance(contents, dict) and "$id" not in contents and "id" not in contents:
                # relative $refs resolve against the download location
                contents = {"$id": url, **contents}
            return JsonSchema(
                contents,
                location=url,
                registry=Registry(retrieve=_retrieve),
            )
        except (ValueError, SchemaError) as exc:
            reason = exc.message if isinstance(exc, SchemaError) else str(exc)
            observer.error(
                ValidationMessage(
                    type=ValidationErrorType.CONTENT_ERROR,
                    location=url,
                    message=f"{entity_type} error parsing the '{url}' schema: {reason}",
                )
            )
        return None
