"""Report registry: the closed set of report kinds and their schemas.

Schemas are built once at import time and shared read-only by every request.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Tuple, Type, get_args

from pydantic import BaseModel

from .models import UnknownReportKind
from .query import (
    AnyReportQuery,
    DatabaseReportQuery,
    ItemReportQuery,
    MasterReportQuery,
    TitleReportQuery,
)
from .schemas import (
    PERIOD_PATTERN,
    REGISTRY_URL_PREFIX,
    Institution,
    Report,
    ReportID,
    ServiceStatus,
)
from .synth import SchemaFaker, register_pattern
from .usage import YOP_PATTERN, DatabaseUsage, ItemUsage, PlatformUsage, TitleUsage

REPORT_IDS: Tuple[str, ...] = get_args(ReportID)

REPORT_NAMES: Dict[str, str] = {
    "PR": "Platform Report",
    "PR_P1": "Platform Usage",
    "DR": "Database Master Report",
    "DR_D1": "Database Search and Item Usage",
    "DR_D2": "Database Access Denied",
    "TR": "Title Report",
    "TR_B1": "Book Requests (Excluding OA_Gold)",
    "TR_B2": "Access Denied by Book",
    "TR_B3": "Book Usage by Access Type",
    "TR_J1": "Journal Requests (Excluding OA_Gold)",
    "TR_J2": "Access Denied by Journal",
    "TR_J3": "Journal Usage by Access Type",
    "TR_J4": "Journal Requests by YOP (Excluding OA_Gold)",
    "IR": "Item Report",
    "IR_A1": "Journal Article Requests",
    "IR_M1": "Multimedia Item Requests",
}

_FAMILY_ITEMS: Dict[str, Type[BaseModel]] = {
    "PR": PlatformUsage,
    "DR": DatabaseUsage,
    "TR": TitleUsage,
    "IR": ItemUsage,
}

# DR standard views serve platform usage items.
_VIEW_ITEMS: Dict[str, Type[BaseModel]] = {
    "DR_D1": PlatformUsage,
    "DR_D2": PlatformUsage,
}

# Master reports accept their family's extended filters, standard views do not.
_MASTER_QUERIES: Dict[str, Type[BaseModel]] = {
    "PR": MasterReportQuery,
    "DR": DatabaseReportQuery,
    "TR": TitleReportQuery,
    "IR": ItemReportQuery,
}


@dataclass(frozen=True)
class ModelSchema:
    """A pydantic model together with its JSON Schema description."""

    model: Type[BaseModel]
    description: Dict[str, Any] = field(compare=False, repr=False)

    @classmethod
    def of(cls, model: Type[BaseModel]) -> "ModelSchema":
        return cls(model=model, description=model.model_json_schema())

    def validate(self, value: Any) -> BaseModel:
        return self.model.model_validate(value)


@dataclass(frozen=True)
class ReportSchema(ModelSchema):
    """Item schema, envelope and accepted query of one report kind."""

    report_id: str = ""
    name: str = ""
    envelope: Type[BaseModel] = Report
    query_model: Type[BaseModel] = AnyReportQuery


def _build(report_id: str) -> ReportSchema:
    family = report_id.split("_", 1)[0]
    item_model = _VIEW_ITEMS.get(report_id, _FAMILY_ITEMS[family])
    query_model = _MASTER_QUERIES[family] if report_id == family else AnyReportQuery
    return ReportSchema(
        model=item_model,
        description=item_model.model_json_schema(),
        report_id=report_id,
        name=REPORT_NAMES[report_id],
        envelope=Report[item_model],
        query_model=query_model,
    )


REGISTRY: Dict[str, ReportSchema] = {report_id: _build(report_id) for report_id in REPORT_IDS}

STATUS_SCHEMA = ModelSchema.of(ServiceStatus)
INSTITUTION_SCHEMA = ModelSchema.of(Institution)


def schema_for(report_id: str) -> ReportSchema:
    """Return the schema registered for ``report_id``."""
    try:
        return REGISTRY[report_id]
    except KeyError:
        raise UnknownReportKind(report_id) from None


def report_name(report_id: str) -> str:
    return schema_for(report_id).name


@register_pattern(PERIOD_PATTERN)
def _period_value(fake: SchemaFaker) -> str:
    day = fake.faker.date_between(start_date="-5y", end_date="today")
    return day.strftime("%Y-%m-%d") if fake.rng.random() < 0.5 else day.strftime("%Y-%m")


@register_pattern(YOP_PATTERN)
def _yop_value(fake: SchemaFaker) -> str:
    return str(fake.rng.randint(1950, date.today().year))


@register_pattern("^" + REGISTRY_URL_PREFIX.replace(".", r"\."))
def _registry_url_value(fake: SchemaFaker) -> str:
    return REGISTRY_URL_PREFIX + fake.faker.uuid4()
