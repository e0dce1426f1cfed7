"""Query parameter validation and projection into report filters/attributes."""
from __future__ import annotations

import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .models import InvalidPeriod
from .schemas import PERIOD_PATTERN, ReportAttribute, ReportFilter

# query key -> COUNTER filter name, emitted in this order
FILTER_PARAMETERS: Tuple[Tuple[str, str], ...] = (
    ("begin_date", "Begin_Date"),
    ("end_date", "End_Date"),
    ("metric_type", "Metric_Types"),
    ("data_type", "Data_Types"),
    ("access_method", "Access_Methods"),
    ("platform", "Platform"),
    ("database", "Database"),
    ("item_id", "Item_ID"),
    ("item_contributor", "Item_Contributor"),
    ("yop", "YOP"),
    ("access_type", "Access_Types"),
)

# query key -> COUNTER attribute name, emitted in this order
ATTRIBUTE_PARAMETERS: Tuple[Tuple[str, str], ...] = (
    ("access_method", "Access_Methods"),
    ("attributes_to_show", "Attribute_To_Shows"),
    ("granularity", "Granularity"),
)

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})(?:-(\d{2}))?(?:T[0-9:.]+(?:Z|[+-]\d{2}:?\d{2})?)?$")


class ReportPeriodQuery(BaseModel):
    model_config = ConfigDict(extra="allow")

    begin_date: str = Field(pattern=PERIOD_PATTERN)
    end_date: str = Field(pattern=PERIOD_PATTERN)


class AnyReportQuery(BaseModel):
    """Parameters accepted by every report; unknown keys pass through."""

    model_config = ConfigDict(extra="allow")

    platform: Optional[str] = None


class MasterReportQuery(AnyReportQuery):
    metric_type: Optional[str] = None  # can be |
    data_type: Optional[str] = None  # can be |
    access_method: Optional[str] = None  # can be |
    attributes_to_show: Optional[str] = None  # can be |
    granularity: Optional[Literal["month", "totals"]] = None


class DatabaseReportQuery(MasterReportQuery):
    database: Optional[str] = None


class TitleReportQuery(MasterReportQuery):
    item_id: Optional[str] = None
    yop: Optional[str] = None  # yyyy|yyyy-yyyy
    access_type: Optional[str] = None


class ItemReportQuery(MasterReportQuery):
    item_id: Optional[str] = None
    item_contributor: Optional[str] = None
    yop: Optional[str] = None
    access_type: Optional[str] = None
    include_component_details: Optional[str] = None
    include_parent_details: Optional[str] = None


@dataclass(frozen=True)
class ReportingPeriod:
    """Inclusive reporting period."""

    begin: date
    end: date


def period(query: Mapping[str, Any]) -> ReportingPeriod:
    """Validate ``begin_date``/``end_date`` and return the inclusive period."""
    begin = _parse_date(query.get("begin_date"), "begin_date", end=False)
    end = _parse_date(query.get("end_date"), "end_date", end=True)
    if begin > end:
        raise InvalidPeriod(f"begin_date {begin.isoformat()} is after end_date {end.isoformat()}")
    return ReportingPeriod(begin=begin, end=end)


def filters_from(query: Mapping[str, Any]) -> List[ReportFilter]:
    """Project recognized, non-empty query parameters into report filters.

    Values are echoed as given; generated items are not restricted by them.
    """
    return [ReportFilter(Name=name, Value=str(query[key])) for key, name in FILTER_PARAMETERS if query.get(key)]


def attributes_from(query: Mapping[str, Any]) -> List[ReportAttribute]:
    return [
        ReportAttribute(Name=name, Value=str(query[key])) for key, name in ATTRIBUTE_PARAMETERS if query.get(key)
    ]


def _parse_date(value: Any, field: str, end: bool) -> date:
    if not isinstance(value, str) or not value:
        raise InvalidPeriod(f"{field} is required")
    match = _DATE_RE.match(value.strip())
    if match is None:
        raise InvalidPeriod(f"{field} '{value}' is not a recognizable date")
    year, month = int(match.group(1)), int(match.group(2))
    try:
        if match.group(3) is not None:
            return date(year, month, int(match.group(3)))
        day = monthrange(year, month)[1] if end else 1
        return date(year, month, day)
    except (ValueError, IndexError) as exc:
        raise InvalidPeriod(f"{field} '{value}' is not a recognizable date") from exc
