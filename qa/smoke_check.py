"""Imperative smoke test that harvests every report from a running endpoint."""
from __future__ import annotations

import os
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable

import requests

DEFAULT_ENV = {
    "API_BASE": "http://localhost:8080",
    "TEST_CUSTOMER_ID": "0000",
    "TEST_BEGIN_DATE": "2023-01",
    "TEST_END_DATE": "2023-12",
}

TIMEOUT = 10
ADVISORY_CODES = {3030, 3031, 3032, 3040, 3050, 3060, 3061, 3062}


def env(key: str) -> str:
    value = os.getenv(key)
    return value if value not in (None, "") else DEFAULT_ENV[key]


@dataclass
class StepResult:
    name: str
    success: bool
    message: str
    duration: float


class SoftFailure(RuntimeError):
    """Raised when the smoke test should exit with warning (code 2)."""


class SmokeContext:
    def __init__(self) -> None:
        self.api_base = env("API_BASE").rstrip("/")
        self.customer_id = env("TEST_CUSTOMER_ID")
        self.report_ids: list[str] = []
        self.empty_reports: list[str] = []
        self.summaries: list[StepResult] = []

    def get(self, path: str, **params: Any) -> requests.Response:
        params.setdefault("customer_id", self.customer_id)
        return requests.get(f"{self.api_base}{path}", params=params, timeout=TIMEOUT)

    def record(self, name: str, func: Callable[[], None]) -> None:
        start = time.time()
        try:
            func()
            success = True
            message = "ok"
        except SoftFailure as exc:
            self.summaries.append(StepResult(name, False, str(exc), time.time() - start))
            self._exit_with_summary(code=2)
        except Exception as exc:  # pragma: no cover - CLI path
            self.summaries.append(StepResult(name, False, f"{exc}", time.time() - start))
            self._exit_with_summary(code=1, extra_message=f"{name} failed: {exc}")
        self.summaries.append(StepResult(name, success, message, time.time() - start))

    def _exit_with_summary(self, code: int, extra_message: str | None = None) -> None:
        print_summary(self.summaries)
        if extra_message:
            print(extra_message, file=sys.stderr)
        sys.exit(code)


def ensure_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:  # pragma: no cover - network only
        raise RuntimeError(f"Non-JSON response: {response.status_code} {response.text}") from exc


def step_status(ctx: SmokeContext) -> None:
    for attempt in (1, 2):
        resp = ctx.get("/r5/_inaccurate-report-list/status")
        if resp.status_code == 200:
            statuses = ensure_json(resp)
            if len(statuses) != 1 or statuses[0].get("Service_Active") is not True:
                raise RuntimeError(f"Unexpected status payload: {statuses}")
            return
        time.sleep(1 if attempt == 1 else 0)
    raise RuntimeError(f"Status check failed: {resp.status_code} {resp.text}")


def step_members(ctx: SmokeContext) -> None:
    resp = ctx.get("/r5/members")
    if resp.status_code != 200:
        raise RuntimeError(f"members failed: {resp.status_code} {resp.text}")
    for member in ensure_json(resp):
        if "Customer_ID" not in member or "Name" not in member:
            raise RuntimeError(f"Member without Customer_ID/Name: {member}")


def step_report_list(ctx: SmokeContext) -> None:
    resp = ctx.get("/r5/reports")
    if resp.status_code != 200:
        raise RuntimeError(f"report list failed: {resp.status_code} {resp.text}")
    ctx.report_ids = [item["Report_ID"] for item in ensure_json(resp)]
    if not ctx.report_ids:
        raise SoftFailure("Report list is empty; nothing to harvest.")


def step_harvest(ctx: SmokeContext) -> None:
    assert ctx.report_ids, "Report list must be loaded before harvesting"
    for report_id in ctx.report_ids:
        resp = ctx.get(
            f"/r5/reports/{report_id.lower()}",
            begin_date=env("TEST_BEGIN_DATE"),
            end_date=env("TEST_END_DATE"),
        )
        if resp.status_code != 200:
            raise RuntimeError(f"{report_id} failed: {resp.status_code} {resp.text}")
        report = ensure_json(resp)
        header = report.get("Report_Header") or {}
        if header.get("Report_ID") != report_id:
            raise RuntimeError(f"{report_id} returned header for {header.get('Report_ID')}")
        codes = {exc.get("Code") for exc in header.get("Exceptions") or []}
        if not codes <= ADVISORY_CODES:
            raise RuntimeError(f"{report_id} carries unexpected exceptions: {sorted(codes)}")
        if not report.get("Report_Items"):
            if 3030 not in codes:
                raise RuntimeError(f"{report_id} is empty without a 3030 exception")
            ctx.empty_reports.append(report_id)


def step_rejections(ctx: SmokeContext) -> None:
    resp = ctx.get("/r5/reports/unknown_report", begin_date=env("TEST_BEGIN_DATE"), end_date=env("TEST_END_DATE"))
    if resp.status_code != 404 or ensure_json(resp).get("Code") != 3000:
        raise RuntimeError(f"Unsupported report not rejected: {resp.status_code} {resp.text}")
    resp = requests.get(f"{ctx.api_base}/r5/members", timeout=TIMEOUT)
    if resp.status_code != 400 or ensure_json(resp).get("Code") != 1030:
        raise RuntimeError(f"Missing customer_id not rejected: {resp.status_code} {resp.text}")


def print_summary(results: list[StepResult], empty_reports: list[str] | None = None) -> None:
    if not results:
        return
    print("\nSmoke Summary:")
    for result in results:
        status = "✅" if result.success else "❌"
        print(f" {status} {result.name} ({result.duration:.2f}s) - {result.message}")
    if empty_reports:
        print(f" ⚠️  Empty reports (3030): {', '.join(empty_reports)}")


def main() -> None:
    ctx = SmokeContext()
    steps = [
        ("status", lambda: step_status(ctx)),
        ("members", lambda: step_members(ctx)),
        ("reports", lambda: step_report_list(ctx)),
        ("harvest", lambda: step_harvest(ctx)),
        ("rejections", lambda: step_rejections(ctx)),
    ]
    for name, func in steps:
        ctx.record(name, func)
    print_summary(ctx.summaries, ctx.empty_reports)


if __name__ == "__main__":  # pragma: no cover - CLI entry
    main()
