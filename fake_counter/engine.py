"""Report synthesis pipeline wiring query mapping, generation, policy and assembly."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Union

from faker import Faker
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from . import query as query_mapper
from .assembler import ReportAssembler
from .catalog import EXCEPTIONS, outcome_status
from .config import Settings, get_settings
from .models import ServiceError
from .policy import ExceptionPolicy
from .registry import INSTITUTION_SCHEMA, STATUS_SCHEMA, ReportSchema, schema_for
from .schemas import Report
from .synth import FakeDataGenerator, SchemaCache

logger = logging.getLogger(__name__)


@dataclass
class ReportOutcome:
    report: Report
    status_code: int


class ReportEngine:
    """Builds one report per call; components are injected for determinism in tests."""

    def __init__(
        self,
        generator: FakeDataGenerator,
        policy: ExceptionPolicy,
        assembler: ReportAssembler,
        min_items: int = 0,
    ) -> None:
        self.generator = generator
        self.policy = policy
        self.assembler = assembler
        self.min_items = min_items

    @classmethod
    def from_settings(cls, settings: Settings, cache: Optional[SchemaCache] = None) -> "ReportEngine":
        rng = random.Random(settings.random_seed)
        faker = Faker()
        faker.seed_instance(rng.getrandbits(32))
        generator = FakeDataGenerator(
            rng=rng,
            faker=faker,
            cache=cache,
            extra_items=settings.report_extra_items,
            optional_probability=settings.optional_field_probability,
        )
        return cls(
            generator=generator,
            policy=ExceptionPolicy(settings.exception_probability, rng=rng),
            assembler=ReportAssembler(
                created_by=settings.created_by,
                institution_name=settings.institution_name,
                rng=rng,
                faker=faker,
            ),
            min_items=settings.report_min_items,
        )

    def build(self, report_id: str, query: Mapping[str, Any], customer_id: Optional[str] = None) -> ReportOutcome:
        schema = schema_for(report_id)
        params = self.parse_query(schema, query)
        query_mapper.period(params)
        filters = query_mapper.filters_from(params)
        attributes = query_mapper.attributes_from(params)

        # Filters are echoed in the header only; items are drawn independently of them.
        items = self.generator.generate(schema, self.min_items)
        exceptions = self.policy.decide(len(items))
        report = self.assembler.assemble(
            report_id, filters, attributes, exceptions, items, customer_id=customer_id
        )
        status_code = outcome_status(exceptions)
        logger.info(
            "report.generated",
            extra={
                "report_id": report_id,
                "item_count": len(items),
                "exception_codes": [exc.Code for exc in exceptions],
                "status_code": status_code,
            },
        )
        return ReportOutcome(report=report, status_code=status_code)

    @staticmethod
    def parse_query(schema: ReportSchema, query: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate ``query`` for ``schema`` and return the accepted parameters."""
        try:
            query_mapper.ReportPeriodQuery.model_validate(query)
            params = schema.query_model.model_validate(query)
        except ValidationError as exc:
            raise ServiceError(
                "Invalid report query", entry=EXCEPTIONS["not_enough_information"], data=describe_errors(exc)
            ) from exc
        return params.model_dump(exclude_none=True)

    def validate(self, schema: ReportSchema, report: Report) -> BaseModel:
        """Check a report against the registry envelope for ``schema``."""
        payload = report.model_dump(mode="json", exclude_none=True)
        try:
            return schema.envelope.model_validate(payload)
        except ValidationError as exc:
            logger.error("report.invalid", extra={"report_id": schema.report_id, "errors": exc.errors()})
            raise ServiceError(
                "Report failed envelope validation",
                entry=EXCEPTIONS["not_available"],
                data="Error serializing response. See logs of application for more details.",
            ) from exc

    def statuses(self) -> List[Dict[str, Any]]:
        return self.generator.generate(STATUS_SCHEMA, min_items=1, max_items=1)

    def members(self) -> List[Dict[str, Any]]:
        return self.generator.generate(INSTITUTION_SCHEMA)


def describe_errors(exc: Union[ValidationError, RequestValidationError]) -> str:
    return ", ".join(f"{'.'.join(str(loc) for loc in err['loc'])} is {err['msg']}" for err in exc.errors())


@lru_cache(maxsize=1)
def get_engine() -> ReportEngine:
    """Process-wide engine built from settings; owns the schema cache."""
    return ReportEngine.from_settings(get_settings())
