"""COUNTER R5 endpoints: status, members, report list and report synthesis."""
from __future__ import annotations

import random
import threading
from typing import Any, Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..engine import ReportEngine, get_engine
from ..models import NotAuthorized, UnknownReportKind
from ..registry import REPORT_IDS, REPORT_NAMES, schema_for
from ..schemas import CounterException, Institution, ReportListItem, ServiceStatus
from ..utils.security import require_customer_id

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": CounterException},
    401: {"model": CounterException},
    403: {"model": CounterException},
    404: {"model": CounterException},
}


class AlternatingAuthFailure:
    """Lets a URL succeed once, then fails the next call with a random auth exception."""

    CHOICES = ("not_enough_information", "api_not_authorized", "customer_not_authorized", "requestor_not_authorized")

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self._last_success: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def check(self, url: str) -> None:
        with self._lock:
            last = self._last_success.get(url, False)
            self._last_success[url] = not last
        if last:
            raise NotAuthorized(self.rng.choice(self.CHOICES))


def build_router(
    listed: Sequence[str] = REPORT_IDS,
    served: Sequence[str] = REPORT_IDS,
    alternate_auth_failures: bool = False,
    include_status: bool = False,
    include_members: bool = True,
) -> APIRouter:
    """Build one R5 router.

    ``listed`` drives ``/reports`` while ``served`` decides which report ids
    are synthesized; the two differ on purpose for the inaccurate-list variant.
    When ``alternate_auth_failures`` is set, the alternation runs only once the
    request's query has passed validation.
    """
    router = APIRouter(tags=["r5"])
    dependencies = [Depends(require_customer_id())]
    alternator = AlternatingAuthFailure() if alternate_auth_failures else None
    list_dependencies = list(dependencies)
    if alternator is not None:

        def alternate_auth(request: Request) -> None:
            alternator.check(str(request.url))

        list_dependencies.append(Depends(alternate_auth))
    served_ids = {report_id.upper() for report_id in served}

    if include_status:

        @router.get(
            "/status",
            response_model=List[ServiceStatus],
            response_model_exclude_none=True,
            dependencies=dependencies,
            responses=ERROR_RESPONSES,
        )
        def service_status(engine: ReportEngine = Depends(get_engine)) -> List[Dict[str, Any]]:
            return engine.statuses()

    if include_members:

        @router.get(
            "/members",
            response_model=List[Institution],
            response_model_exclude_none=True,
            dependencies=dependencies,
            responses=ERROR_RESPONSES,
        )
        def member_list(engine: ReportEngine = Depends(get_engine)) -> List[Dict[str, Any]]:
            return engine.members()

    @router.get(
        "/reports",
        response_model=List[ReportListItem],
        response_model_exclude_none=True,
        dependencies=list_dependencies,
        responses=ERROR_RESPONSES,
    )
    def report_list(search: Optional[str] = None) -> List[ReportListItem]:
        needle = (search or "").lower()
        reports = [
            ReportListItem(
                Report_ID=report_id,
                Report_Name=REPORT_NAMES.get(report_id, "Unknown Report"),
                Report_Description="Randomly generated report",
                Release=5,
                Path=f"/reports/{report_id.lower()}",
            )
            for report_id in listed
        ]
        return [report for report in reports if needle in report.Report_Name.lower()]

    @router.get("/reports/{report_id}", dependencies=dependencies, responses=ERROR_RESPONSES)
    def report(report_id: str, request: Request, engine: ReportEngine = Depends(get_engine)) -> JSONResponse:
        normalized = report_id.upper()
        if normalized not in served_ids:
            raise UnknownReportKind(report_id)
        schema = schema_for(normalized)
        query = dict(request.query_params)
        if alternator is not None:
            engine.parse_query(schema, query)
            alternator.check(str(request.url))
        outcome = engine.build(normalized, query, customer_id=query.get("customer_id"))
        validated = engine.validate(schema, outcome.report)
        return JSONResponse(
            status_code=outcome.status_code,
            content=validated.model_dump(mode="json", exclude_none=True),
        )

    return router


INACCURATE_LIST_SERVED = ("PR", "PR_P1", "DR", "DR_D1", "DR_D2", "IR", "IR_A1", "IR_M1")

router = build_router()
nth2_auth_exception_router = build_router(alternate_auth_failures=True, include_members=False)
inaccurate_report_list_router = build_router(
    listed=("PR", "DR", "TR"), served=INACCURATE_LIST_SERVED, include_status=True
)
