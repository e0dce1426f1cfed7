from fake_counter.main import app

import pytest
from httpx import ASGITransport, AsyncClient

from fake_counter.registry import REPORT_IDS

PERIOD = {"customer_id": "0000", "begin_date": "2023-01", "end_date": "2023-12"}


async def get(path: str, **params):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path, params=params)


@pytest.mark.asyncio
async def test_missing_customer_id_is_insufficient_information():
    response = await get("/r5/members")
    assert response.status_code == 400
    body = response.json()
    assert body["Code"] == 1030
    assert body["Severity"] == "Fatal"
    assert "customer_id" in body["Data"]


@pytest.mark.asyncio
async def test_unknown_customer_is_not_authorized():
    response = await get("/r5/reports", customer_id="9999")
    assert response.status_code == 403
    assert response.json()["Code"] == 2010


@pytest.mark.asyncio
async def test_status_has_exactly_one_entry():
    response = await get("/r5/_inaccurate-report-list/status", customer_id="0000")
    assert response.status_code == 200
    statuses = response.json()
    assert len(statuses) == 1
    assert statuses[0]["Service_Active"] is True


@pytest.mark.asyncio
async def test_members_list():
    response = await get("/r5/members", customer_id="0000")
    assert response.status_code == 200
    for member in response.json():
        assert {"Customer_ID", "Name"} <= set(member)


@pytest.mark.asyncio
async def test_report_list_contains_every_report():
    response = await get("/r5/reports", customer_id="0000")
    assert response.status_code == 200
    reports = response.json()
    assert [report["Report_ID"] for report in reports] == list(REPORT_IDS)
    assert all(report["Release"] == 5 for report in reports)
    assert all(report["Report_Description"] == "Randomly generated report" for report in reports)


@pytest.mark.asyncio
async def test_report_list_search_is_case_insensitive():
    response = await get("/r5/reports", customer_id="0000", search="JOURNAL")
    assert response.status_code == 200
    assert {report["Report_ID"] for report in response.json()} == {"TR_J1", "TR_J2", "TR_J3", "TR_J4", "IR_A1"}


@pytest.mark.asyncio
async def test_report_is_generated():
    response = await get("/r5/reports/pr", **PERIOD)
    assert response.status_code == 200
    report = response.json()
    header = report["Report_Header"]
    assert header["Report_ID"] == "PR"
    assert header["Report_Name"] == "Platform Report"
    assert header["Release"] == "5"
    assert header["Customer_ID"] == "0000"
    assert {"Name": "Begin_Date", "Value": "2023-01"} in header["Report_Filters"]
    assert isinstance(report["Report_Items"], list)
    if not report["Report_Items"]:
        assert [exc["Code"] for exc in header["Exceptions"]] == [3030]


@pytest.mark.asyncio
async def test_unsupported_report():
    response = await get("/r5/reports/xx_q9", **PERIOD)
    assert response.status_code == 404
    assert response.json()["Code"] == 3000


@pytest.mark.asyncio
async def test_inverted_period_is_rejected():
    response = await get("/r5/reports/tr", customer_id="0000", begin_date="2023-12", end_date="2023-01")
    assert response.status_code == 400
    assert response.json()["Code"] == 1030


@pytest.mark.asyncio
async def test_missing_period_is_rejected():
    response = await get("/r5/reports/ir", customer_id="0000")
    assert response.status_code == 400
    body = response.json()
    assert body["Code"] == 1030
    assert "begin_date" in body["Data"]


@pytest.mark.asyncio
async def test_every_second_call_fails_authorization():
    path = "/r5/_nth2-auth-exception/reports"
    first = await get(path, customer_id="0000")
    second = await get(path, customer_id="0000")
    third = await get(path, customer_id="0000")
    assert first.status_code == 200
    assert second.status_code in (400, 401, 403)
    assert second.json()["Code"] in (1030, 2000, 2010, 2020)
    assert third.status_code == 200


@pytest.mark.asyncio
async def test_alternating_variant_tracks_urls_separately():
    path = "/r5/_nth2-auth-exception/reports"
    assert (await get(path, customer_id="0000", search="platform")).status_code == 200
    assert (await get(path, customer_id="0000", search="title")).status_code == 200


@pytest.mark.asyncio
async def test_alternating_variant_has_no_status_route():
    response = await get("/r5/_nth2-auth-exception/status", customer_id="0000")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_inaccurate_list_differs_from_served_reports():
    base = "/r5/_inaccurate-report-list"
    listed = await get(f"{base}/reports", customer_id="0000")
    assert [report["Report_ID"] for report in listed.json()] == ["PR", "DR", "TR"]

    title = await get(f"{base}/reports/tr", **PERIOD)
    assert title.status_code == 404
    assert title.json()["Code"] == 3000

    item = await get(f"{base}/reports/ir_a1", **PERIOD)
    assert item.status_code == 200
    assert item.json()["Report_Header"]["Report_ID"] == "IR_A1"


@pytest.mark.asyncio
async def test_standard_router_has_no_status_route():
    response = await get("/r5/status", customer_id="0000")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_alternating_report_route_fails_every_second_valid_call():
    path = "/r5/_nth2-auth-exception/reports/pr_p1"
    first = await get(path, **PERIOD)
    second = await get(path, **PERIOD)
    assert first.status_code == 200
    assert second.status_code in (400, 401, 403)
    assert second.json()["Code"] in (1030, 2000, 2010, 2020)


@pytest.mark.asyncio
async def test_invalid_query_does_not_consume_alternation_turn():
    path = "/r5/_nth2-auth-exception/reports/dr"
    for _ in range(2):
        response = await get(path, customer_id="0000", end_date="2023-12")
        assert response.status_code == 400
        assert "begin_date" in response.json()["Data"]

    valid = {"customer_id": "0000", "begin_date": "2023-02", "end_date": "2023-12"}
    assert (await get(path, **valid)).status_code == 200
    assert (await get(path, **valid)).status_code != 200
