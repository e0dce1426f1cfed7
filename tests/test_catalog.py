import pytest

from fake_counter.catalog import EXCEPTIONS, entry_for_code, outcome_status
from fake_counter.models import GenerationError, InvalidPeriod, NotAuthorized, UnknownReportKind, format_error


def test_codes_are_unique():
    codes = [entry.code for entry in EXCEPTIONS.values()]
    assert len(codes) == len(set(codes))


def test_entry_for_code_round_trips_catalog():
    assert entry_for_code(3030) is EXCEPTIONS["no_usage_available"]
    with pytest.raises(KeyError):
        entry_for_code(9999)


def test_outcome_status_without_exceptions_is_ok():
    assert outcome_status([]) == 200


def test_outcome_status_uses_most_severe_exception():
    exceptions = [
        EXCEPTIONS["partial_data"].to_exception(),
        EXCEPTIONS["not_enough_information"].to_exception(),
        EXCEPTIONS["report_not_supported"].to_exception(),
    ]
    assert outcome_status(exceptions) == 400


def test_no_usage_keeps_report_status_ok():
    assert outcome_status([EXCEPTIONS["no_usage_available"].to_exception()]) == 200


def test_format_error_omits_empty_fields():
    body = format_error(EXCEPTIONS["report_not_supported"])
    assert body == {"Code": 3000, "Severity": "Error", "Message": "Report Not Supported"}


def test_format_error_includes_data():
    body = format_error(EXCEPTIONS["not_enough_information"], "begin_date is required")
    assert body["Code"] == 1030
    assert body["Data"] == "begin_date is required"


@pytest.mark.parametrize(
    "error, code, status",
    [
        (UnknownReportKind("XX"), 3000, 404),
        (InvalidPeriod("begin_date is required"), 1030, 400),
        (GenerationError("boom"), 1000, 503),
        (NotAuthorized("customer_not_authorized"), 2010, 403),
        (NotAuthorized("requestor_not_authorized"), 2000, 401),
    ],
)
def test_service_errors_map_to_catalog(error, code, status):
    assert error.code == code
    assert error.status_code == status
