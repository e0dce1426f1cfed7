"""Usage item models, one per report family (platform, database, title, item)."""
from __future__ import annotations

from datetime import date
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, Field

from .schemas import ItemID, ItemPerformance, PublisherID

AccessMethod = Literal["Regular", "TDM"]
AccessType = Literal["Controlled", "OA_Gold", "Other_Free_To_Read"]
SectionType = Literal["Article", "Book", "Chapter", "Other", "Section"]
YOP_PATTERN = r"[0-9]{4}"


class PlatformUsage(BaseModel):
    Platform: str
    Data_Type: Optional[
        Literal[
            "Article",
            "Book",
            "Book_Segment",
            "Database",
            "Dataset",
            "Journal",
            "Multimedia",
            "Newspaper_or_Newsletter",
            "Other",
            "Platform",
            "Report",
            "Repository_Item",
            "Thesis_or_Dissertation",
            "Unspecified",
        ]
    ] = None
    Access_Method: Optional[AccessMethod] = None
    Performance: List[ItemPerformance] = Field(min_length=1)


class DatabaseUsage(BaseModel):
    Database: str
    Item_ID: Optional[Annotated[List[ItemID], Field(min_length=1)]] = None
    Platform: str
    Publisher: str
    Publisher_ID: Optional[Annotated[List[PublisherID], Field(min_length=1)]] = None
    Data_Type: Optional[
        Literal[
            "Book",
            "Database",
            "Journal",
            "Multimedia",
            "Newspaper_or_Newsletter",
            "Other",
            "Report",
            "Thesis_or_Dissertation",
            "Unspecified",
        ]
    ] = None
    Access_Method: Optional[AccessMethod] = None
    Performance: List[ItemPerformance] = Field(min_length=1)


class TitleUsage(BaseModel):
    Title: str
    Item_ID: Optional[ItemID] = None
    Platform: str
    Publisher: str
    Publisher_ID: Optional[PublisherID] = None
    Data_Type: Optional[
        Literal[
            "Book",
            "Database",
            "Journal",
            "Newspaper_or_Newsletter",
            "Other",
            "Report",
            "Thesis_or_Dissertation",
            "Unspecified",
        ]
    ] = None
    Section_Type: Optional[SectionType] = None
    YOP: Optional[Annotated[str, Field(pattern=YOP_PATTERN)]] = None
    Access_Type: Optional[AccessType] = None
    Access_Method: Optional[str] = None
    Performance: List[ItemPerformance] = Field(min_length=1)


class ItemContributor(BaseModel):
    Type: Literal["Author"]
    Name: str
    Identifier: Optional[str] = None


class ItemDate(BaseModel):
    Type: Literal["Publication_Date"]
    Value: date


class ItemAttribute(BaseModel):
    Type: Literal["Article_Version", "Article_Type", "Qualification_Name", "Qualification_Level", "Proprietary"]
    Value: str


ItemDataType = Literal[
    "Article",
    "Book",
    "Book_Segment",
    "Dataset",
    "Journal",
    "Multimedia",
    "Newspaper_or_Newsletter",
    "Other",
    "Report",
    "Repository_Item",
    "Thesis_or_Dissertation",
    "Unspecified",
]


class ItemParent(BaseModel):
    Item_Name: Optional[str] = None
    Item_ID: ItemID
    Item_Contributors: Optional[Annotated[List[ItemContributor], Field(min_length=1)]] = None
    Item_Dates: Optional[Annotated[List[ItemDate], Field(min_length=1)]] = None
    Item_Attributes: Optional[Annotated[List[ItemAttribute], Field(min_length=1)]] = None
    Data_Type: Optional[
        Literal[
            "Book",
            "Dataset",
            "Journal",
            "Multimedia",
            "Newspaper_or_Newsletter",
            "Other",
            "Report",
            "Repository_Item",
            "Thesis_or_Dissertation",
            "Unspecified",
        ]
    ] = None


class ItemComponent(BaseModel):
    Item_Name: Optional[str] = None
    Item_ID: ItemID
    Item_Contributors: Optional[Annotated[List[ItemContributor], Field(min_length=1)]] = None
    Item_Dates: Optional[Annotated[List[ItemDate], Field(min_length=1)]] = None
    Item_Attributes: Optional[Annotated[List[ItemAttribute], Field(min_length=1)]] = None
    Data_Type: Optional[ItemDataType] = None
    Performance: List[ItemPerformance] = Field(min_length=1)


class ItemUsage(BaseModel):
    Item: str
    Item_ID: Optional[Annotated[List[ItemID], Field(min_length=1)]] = None
    Item_Contributors: Optional[Annotated[List[ItemContributor], Field(min_length=1)]] = None
    Item_Dates: Optional[Annotated[List[ItemDate], Field(min_length=1)]] = None
    Item_Attributes: Optional[Annotated[List[ItemAttribute], Field(min_length=1)]] = None
    Platform: str
    Publisher: str
    Publisher_ID: Optional[Annotated[List[PublisherID], Field(min_length=1)]] = None
    Item_Parent: Optional[ItemParent] = None
    Item_Component: Optional[Annotated[List[ItemComponent], Field(min_length=1)]] = None
    Data_Type: Optional[ItemDataType] = None
    Section_Type: Optional[SectionType] = None
    YOP: Optional[Annotated[str, Field(pattern=YOP_PATTERN)]] = None
    Access_Type: Optional[AccessType] = None
    Access_Method: Optional[str] = None
    Performance: List[ItemPerformance] = Field(min_length=1)
