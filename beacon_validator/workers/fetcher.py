"""Blocking HTTP fetcher.

Responsible solely for retrieving Beacon responses from a URL.

Uses a single long-lived ``httpx.Client`` managed by the module; see
``get_http_client`` and ``close_http_client`` for lifecycle hooks.
Nothing is retried: every failure is reported once and the caller moves
on to the next piece of work.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from beacon_validator.core.config import settings
from beacon_validator.models.messages import ValidationErrorType, ValidationMessage
from beacon_validator.services.observer import ValidationObserver

logger = logging.getLogger(__name__)

# Module-level shared client
_http_client: Optional[httpx.Client] = None

_NO_CONTENT = 204


def get_http_client() -> httpx.Client:
    """Return the shared Client.  Creates one if missing."""
    global _http_client  # noqa: PLW0603
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.Client(
            # Only connecting is bounded; slow Beacons are given all the time they need.
            timeout=httpx.Timeout(None, connect=settings.http_connect_timeout),
            follow_redirects=True,
            verify=settings.http_verify_ssl,
            headers={
                "User-Agent": settings.http_user_agent,
                "Accept": "application/json",
                "Cache-Control": "no-cache, no-store, must-revalidate",
                "Expires": "0",
            },
        )
    return _http_client


def close_http_client() -> None:
    """Close the shared Client gracefully."""
    global _http_client  # noqa: PLW0603
    if _http_client is not None and not _http_client.is_closed:
        _http_client.close()
        _http_client = None
        logger.debug("HTTP client closed.")


class FetchError(Exception):
    """Raised when the fetcher cannot collect a response body."""

    def __init__(self, error: ValidationMessage) -> None:
        super().__init__(error.message)
        self.error = error


def fetch_content(
    url: str,
    observer: ValidationObserver,
    *,
    body: Optional[dict[str, Any]] = None,
) -> Optional[str]:
    """Fetch *url* and return the response text, or ``None`` on failure.

    A GET is issued unless a JSON *body* is given, in which case the body
    is POSTed.  Failures are reported to *observer*; this function never
    raises for network or HTTP errors.
    """
    try:
        return _do_fetch(url, body)
    except FetchError as exc:
        logger.debug("Fetch failed for %s: %s", url, exc)
        observer.error(exc.error)
        return None


def _do_fetch(url: str, body: Optional[dict[str, Any]]) -> str:
    """Perform a single request and return the non-empty response text."""
    try:
        target = httpx.URL(url)
        if not target.is_absolute_url:
            raise FetchError(
                ValidationMessage(
                    type=ValidationErrorType.CONNECTION_ERROR,
                    code=0,
                    location=url,
                    message=f"relative Beacon endpoint {url}",
                )
            )

        client = get_http_client()
        if body is None:
            response = client.get(target)
        else:
            response = client.post(
                target,
                content=json.dumps(body),
                headers={"Content-Type": "application/json"},
            )
    except (httpx.InvalidURL, httpx.HTTPError) as exc:
        raise FetchError(
            ValidationMessage(
                type=ValidationErrorType.CONNECTION_ERROR,
                location=url,
                message=f"error loading from {exc}",
            )
        ) from exc

    final_url = str(response.url)
    if response.status_code >= 300:
        raise FetchError(
            ValidationMessage(
                type=ValidationErrorType.CONNECTION_ERROR,
                code=response.status_code,
                location=final_url,
                message=f"error loading from {url}",
            )
        )
    if not response.content:
        raise FetchError(
            ValidationMessage(
                type=ValidationErrorType.CONNECTION_ERROR,
                code=_NO_CONTENT,
                location=final_url,
                message=f"empty response from {url}",
            )
        )
    return response.text
