"""Validation observers.

Everything that validates something reports through a
``ValidationObserver`` instead of raising, so a problem in one part of a
Beacon never stops the validation of the rest.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from beacon_validator.models.messages import ValidationMessage

logger = logging.getLogger(__name__)


@runtime_checkable
class ValidationObserver(Protocol):
    def message(self, message: str) -> None:
        """Progress notification."""
        ...

    def error(self, error: ValidationMessage) -> None:
        """A validation problem."""
        ...


class ValidationErrorsCollector:
    """Observer that only collects errors into *errors*."""

    def __init__(self, errors: list[ValidationMessage] | None = None) -> None:
        self.errors: list[ValidationMessage] = [] if errors is None else errors

    def message(self, message: str) -> None:
        pass

    def error(self, error: ValidationMessage) -> None:
        self.errors.append(error)


class ConsoleValidationObserver(ValidationErrorsCollector):
    """Collects errors and logs everything as soon as it is reported."""

    def message(self, message: str) -> None:
        logger.info(message)

    def error(self, error: ValidationMessage) -> None:
        logger.warning("%s: %s", error.type.value, error)
        super().error(error)
