"""Report header construction and final report assembly."""
from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Sequence, Tuple

from faker import Faker

from .registry import report_name
from .schemas import (
    CounterException,
    InstitutionID,
    InstitutionIDType,
    Report,
    ReportAttribute,
    ReportFilter,
    ReportHeader,
)

INSTITUTION_ID_TYPES: Tuple[InstitutionIDType, ...] = ("ISNI", "ISIL", "OCLC", "ROR", "Proprietary")

DEFAULT_CREATED_BY = "Fake Counter Endpoint"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportAssembler:
    """Pairs a freshly built header with generated items.

    Nothing is validated here; the envelope is checked by the caller against
    the registry's report schema.
    """

    def __init__(
        self,
        created_by: str = DEFAULT_CREATED_BY,
        institution_name: Optional[str] = None,
        rng: Optional[random.Random] = None,
        faker: Optional[Faker] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.created_by = created_by
        self.institution_name = institution_name
        self.rng = rng or random.Random()
        if faker is None:
            faker = Faker()
            faker.seed_instance(self.rng.getrandbits(32))
        self.faker = faker
        self.clock = clock

    def institution(self) -> Tuple[str, List[InstitutionID]]:
        """Synthesize an institution name and zero to two typed identifiers."""
        name = self.institution_name or self.faker.company()
        identifiers = [
            InstitutionID(Type=self.rng.choice(INSTITUTION_ID_TYPES), Value=self.faker.bothify("??########").upper())
            for _ in range(self.rng.randint(0, 2))
        ]
        return name, identifiers

    def build_header(
        self,
        report_id: str,
        filters: Sequence[ReportFilter],
        attributes: Sequence[ReportAttribute],
        exceptions: Sequence[CounterException],
        customer_id: Optional[str] = None,
    ) -> ReportHeader:
        name = report_name(report_id)
        institution_name, institution_ids = self.institution()
        return ReportHeader.model_construct(
            Created=self.clock(),
            Created_By=self.created_by,
            Customer_ID=customer_id,
            Report_ID=report_id,
            Report_Name=name,
            Release="5",
            Institution_Name=institution_name,
            Institution_ID=institution_ids or None,
            Report_Filters=list(filters),
            Report_Attributes=list(attributes),
            Exceptions=list(exceptions),
        )

    def assemble(
        self,
        report_id: str,
        filters: Sequence[ReportFilter],
        attributes: Sequence[ReportAttribute],
        exceptions: Sequence[CounterException],
        items: Sequence[Any],
        customer_id: Optional[str] = None,
    ) -> Report:
        header = self.build_header(report_id, filters, attributes, exceptions, customer_id=customer_id)
        return Report.model_construct(Report_Header=header, Report_Items=list(items))
