"""Pydantic schemas describing the COUNTER R5 envelope and shared objects."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, Field

SeverityLevel = Literal["Warning", "Error", "Fatal", "Debug", "Info"]
ReportID = Literal[
    "PR",
    "PR_P1",
    "DR",
    "DR_D1",
    "DR_D2",
    "TR",
    "TR_B1",
    "TR_B2",
    "TR_B3",
    "TR_J1",
    "TR_J2",
    "TR_J3",
    "TR_J4",
    "IR",
    "IR_A1",
    "IR_M1",
]
InstitutionIDType = Literal["ISNI", "ISIL", "OCLC", "ROR", "Proprietary"]
MetricType = Literal[
    "Searches_Automated",
    "Searches_Federated",
    "Searches_Platform",
    "Searches_Regular",
    "Total_Item_Investigations",
    "Total_Item_Requests",
    "Unique_Item_Investigations",
    "Unique_Item_Requests",
    "Unique_Title_Investigations",
    "Unique_Title_Requests",
    "No_License",
    "Limit_Exceeded",
]

PERIOD_PATTERN = r"[0-9]{4}-[0-9]{2}(-[0-9]{2})?"
REGISTRY_URL_PREFIX = "https://registry.countermetrics.org/platform/"

ItemT = TypeVar("ItemT")


class CounterException(BaseModel):
    Code: int
    Severity: SeverityLevel
    Message: str
    Help_URL: Optional[str] = None
    Data: Optional[str] = None


class ReportFilter(BaseModel):
    Name: str
    Value: str


class ReportAttribute(BaseModel):
    Name: str
    Value: str


class InstitutionID(BaseModel):
    Type: InstitutionIDType
    Value: str


class ReportPeriod(BaseModel):
    Begin_Date: str = Field(pattern=PERIOD_PATTERN)
    End_Date: str = Field(pattern=PERIOD_PATTERN)


class ItemID(BaseModel):
    Type: Literal["Online_ISSN", "Print_ISSN", "Linking_ISSN", "ISBN", "DOI", "Proprietary", "URI"]
    Value: str


class PublisherID(BaseModel):
    Type: Literal["ISNI", "ROR", "Proprietary"]
    Value: str


class PerformanceInstance(BaseModel):
    Metric_Type: MetricType
    Value: int = Field(ge=1)


class ItemPerformance(BaseModel):
    Period: ReportPeriod
    Instance: List[PerformanceInstance] = Field(min_length=1)


class ReportHeader(BaseModel):
    Created: datetime
    Created_By: str
    Customer_ID: Optional[str] = None
    Report_ID: ReportID
    Report_Name: str
    Release: Literal["5"]
    Institution_Name: str
    Institution_ID: Optional[List[InstitutionID]] = None
    Report_Filters: List[ReportFilter]
    Report_Attributes: Optional[List[ReportAttribute]] = None
    Exceptions: Optional[List[CounterException]] = None


class Report(BaseModel, Generic[ItemT]):
    """A header paired with its usage items."""

    Report_Header: ReportHeader
    Report_Items: List[ItemT]


class ReportListItem(BaseModel):
    Report_Name: str
    Report_ID: str
    Release: Literal[5]
    Report_Description: str
    Path: Optional[str] = None


class Alert(BaseModel):
    Date_Time: Optional[datetime] = None
    Alert: Optional[str] = None


class ServiceStatus(BaseModel):
    Description: Optional[str] = None
    Service_Active: Literal[True]
    Registry_URL: Optional[Annotated[str, Field(pattern="^" + REGISTRY_URL_PREFIX.replace(".", r"\."))]] = None
    Note: Optional[str] = None
    Alerts: Optional[List[Alert]] = None


class Institution(BaseModel):
    Customer_ID: str
    Requestor_ID: Optional[str] = None
    Name: str
    Notes: Optional[str] = None
    Institution_ID: Optional[List[InstitutionID]] = None
