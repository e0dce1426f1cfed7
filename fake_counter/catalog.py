"""COUNTER exception catalog shared by the report engine and the HTTP layer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .schemas import CounterException, SeverityLevel

SEVERITY_RANK: Dict[str, int] = {"Debug": 0, "Info": 1, "Warning": 2, "Error": 3, "Fatal": 4}


@dataclass(frozen=True)
class CatalogEntry:
    """One row of the catalog: wire fields plus the HTTP outcome it maps to."""

    code: int
    message: str
    severity: SeverityLevel
    status: int

    def to_exception(self, data: Optional[str] = None, help_url: Optional[str] = None) -> CounterException:
        return CounterException(
            Code=self.code,
            Severity=self.severity,
            Message=self.message,
            Help_URL=help_url,
            Data=data,
        )


EXCEPTIONS: Dict[str, CatalogEntry] = {
    "not_available": CatalogEntry(1000, "Service Not Available", "Fatal", 503),
    "busy": CatalogEntry(1010, "Service Busy", "Fatal", 503),
    "queued": CatalogEntry(1011, "Report Queued for Processing", "Warning", 202),
    "too_many_requests": CatalogEntry(1020, "Client has made too many requests", "Fatal", 429),
    "not_enough_information": CatalogEntry(1030, "Insufficient Information to Process Request", "Fatal", 400),
    "requestor_not_authorized": CatalogEntry(2000, "Requestor Not Authorized to Access Service", "Error", 401),
    "customer_not_authorized": CatalogEntry(
        2010, "Requestor is Not Authorized to Access Usage for Institution", "Error", 403
    ),
    "api_not_authorized": CatalogEntry(2020, "APIKey Invalid", "Error", 401),
    "ip_not_authorized": CatalogEntry(2030, "IP Address Not Authorized to Access Service", "Error", 401),
    "report_not_supported": CatalogEntry(3000, "Report Not Supported", "Error", 404),
    "report_version_not_supported": CatalogEntry(3010, "Report Version Not Supported", "Error", 404),
    "invalid_date": CatalogEntry(3020, "Invalid Date Arguments", "Error", 400),
    "no_usage_available": CatalogEntry(3030, "No Usage Available for Requested Dates", "Error", 200),
    "no_usage_ready": CatalogEntry(3031, "Usage Not Ready for Requested Dates", "Warning", 200),
    "no_usage_longer_available": CatalogEntry(3032, "Usage No Longer Available for Requested Dates", "Warning", 200),
    "partial_data": CatalogEntry(3040, "Partial Data Returned", "Warning", 200),
    "parameter_not_recognized": CatalogEntry(3050, "Parameter Not Recognized in this Context", "Warning", 200),
    "invalid_filter": CatalogEntry(3060, "Invalid ReportFilter Value", "Warning", 200),
    "incongruous_filter": CatalogEntry(3061, "Incongruous ReportFilter Value", "Warning", 200),
    "invalid_attribute": CatalogEntry(3062, "Invalid ReportAttribute Value", "Warning", 200),
}

_BY_CODE: Dict[int, CatalogEntry] = {entry.code: entry for entry in EXCEPTIONS.values()}


def entry_for_code(code: int) -> CatalogEntry:
    """Return the catalog entry for ``code``; raises KeyError for ad-hoc codes."""
    return _BY_CODE[code]


def outcome_status(exceptions: Iterable[CounterException]) -> int:
    """HTTP status implied by the most severe exception, 200 when there is none."""
    worst: Optional[CounterException] = None
    for exception in exceptions:
        if worst is None or SEVERITY_RANK[exception.Severity] > SEVERITY_RANK[worst.Severity]:
            worst = exception
    if worst is None:
        return 200
    return entry_for_code(worst.Code).status
