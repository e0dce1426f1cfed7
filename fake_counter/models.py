"""Service errors raised by the report engine and rendered by the API layer."""
from __future__ import annotations

from typing import Any, Dict, Optional

from .catalog import EXCEPTIONS, CatalogEntry


class ServiceError(Exception):
    """Custom exception that drives uniform COUNTER exception responses."""

    default_entry: str = "not_available"

    def __init__(self, message: Optional[str] = None, entry: Optional[CatalogEntry] = None, data: Optional[str] = None) -> None:
        self.entry = entry or EXCEPTIONS[self.default_entry]
        self.data = data
        self.message = message or self.entry.message
        super().__init__(self.message)

    @property
    def code(self) -> int:
        return self.entry.code

    @property
    def status_code(self) -> int:
        return self.entry.status


class UnknownReportKind(ServiceError):
    """Report identifier outside the closed set of supported reports."""

    default_entry = "report_not_supported"

    def __init__(self, report_id: str) -> None:
        super().__init__(f"Unknown report '{report_id}'", data=f"Report '{report_id}' is not supported")
        self.report_id = report_id


class InvalidPeriod(ServiceError):
    """Malformed or inverted reporting period."""

    default_entry = "not_enough_information"

    def __init__(self, message: str) -> None:
        super().__init__(message, data=message)


class GenerationError(ServiceError):
    """The synthesizer could not satisfy a schema constraint."""

    default_entry = "not_available"

    def __init__(self, message: str) -> None:
        super().__init__(message, data="Unable to generate report data. See logs of application for more details.")


class NotAuthorized(ServiceError):
    """Credential checks failed before reaching the report engine."""

    def __init__(self, entry_key: str, data: Optional[str] = None) -> None:
        super().__init__(entry=EXCEPTIONS[entry_key], data=data)


def format_error(entry: CatalogEntry, data: Optional[str] = None) -> Dict[str, Any]:
    return entry.to_exception(data=data).model_dump(exclude_none=True)
