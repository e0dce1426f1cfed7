from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import requests

ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
DEFAULTS = {
    "API_BASE": "http://localhost:8080",
    "TEST_CUSTOMER_ID": "0000",
}

if ENV_PATH.exists():
    for line in ENV_PATH.read_text().splitlines():
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())


@dataclass
class ApiClient:
    base_url: str
    customer_id: str

    def get(self, path: str, authenticated: bool = True, **params: Any) -> requests.Response:
        if authenticated:
            params.setdefault("customer_id", self.customer_id)
        url = f"{self.base_url.rstrip('/')}{path}"
        try:
            return requests.get(url, params=params, timeout=10)
        except requests.RequestException as exc:  # pragma: no cover - network only
            raise RuntimeError(f"HTTP GET {url} failed: {exc}") from exc

    def get_json(self, path: str, **params: Any) -> Any:
        response = self.get(path, **params)
        try:
            return response.json()
        except ValueError as exc:  # pragma: no cover
            raise AssertionError(f"Non-JSON response from {path}: {response.text}") from exc


@pytest.fixture(scope="session")
def api() -> ApiClient:
    base = os.getenv("API_BASE", DEFAULTS["API_BASE"])
    client = ApiClient(base_url=base, customer_id=os.getenv("TEST_CUSTOMER_ID", DEFAULTS["TEST_CUSTOMER_ID"]))
    try:
        requests.get(f"{base.rstrip('/')}/healthz", timeout=3)
    except requests.RequestException:
        pytest.skip(f"No endpoint reachable at {base}")
    return client


@pytest.fixture(scope="session")
def report_ids(api: ApiClient) -> list[str]:
    response = api.get("/r5/reports")
    assert response.status_code == 200, f"Unexpected status: {response.status_code} {response.text}"
    ids = [item["Report_ID"] for item in response.json()]
    if not ids:
        pytest.fail("No reports listed by /r5/reports")
    return ids
