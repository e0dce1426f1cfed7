import random

import pytest

from fake_counter.catalog import EXCEPTIONS, outcome_status
from fake_counter.policy import ADVISORY_EXCEPTIONS, ExceptionPolicy


@pytest.mark.parametrize("probability", [0.0, 1.0])
def test_empty_result_gets_only_no_usage(probability):
    exceptions = ExceptionPolicy(probability, rng=random.Random(3)).decide(0)
    assert [exc.Code for exc in exceptions] == [3030]
    assert outcome_status(exceptions) == 200


def test_certain_probability_adds_one_advisory_exception():
    advisory_codes = {EXCEPTIONS[key].code for key in ADVISORY_EXCEPTIONS}
    policy = ExceptionPolicy(1.0, rng=random.Random(3))
    for _ in range(20):
        exceptions = policy.decide(10)
        assert len(exceptions) == 1
        assert exceptions[0].Code in advisory_codes
        assert exceptions[0].Severity == "Warning"


def test_zero_probability_adds_nothing():
    assert ExceptionPolicy(0.0).decide(5) == []


@pytest.mark.parametrize("probability", [-0.1, 1.5])
def test_probability_out_of_range_is_rejected(probability):
    with pytest.raises(ValueError):
        ExceptionPolicy(probability)
