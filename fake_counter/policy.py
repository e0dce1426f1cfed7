"""Selection of the COUNTER exceptions embedded in a report header."""
from __future__ import annotations

import random
from typing import List, Optional, Tuple

from .catalog import EXCEPTIONS
from .schemas import CounterException

BLOCKING_EXCEPTION = "no_usage_available"

ADVISORY_EXCEPTIONS: Tuple[str, ...] = (
    "partial_data",
    "parameter_not_recognized",
    "invalid_filter",
    "incongruous_filter",
    "invalid_attribute",
    "no_usage_ready",
    "no_usage_longer_available",
)


class ExceptionPolicy:
    """Decides, after generation, which exceptions accompany a report.

    An empty result always yields the blocking "no usage" exception and
    nothing else. Otherwise one advisory exception is drawn with
    ``probability``. At most one exception is returned per call.
    """

    def __init__(self, probability: float = 0.25, rng: Optional[random.Random] = None) -> None:
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"probability must be within [0, 1], got {probability}")
        self.probability = probability
        self.rng = rng or random.Random()

    def decide(self, item_count: int) -> List[CounterException]:
        if item_count <= 0:
            return [EXCEPTIONS[BLOCKING_EXCEPTION].to_exception()]
        if self.rng.random() < self.probability:
            key = self.rng.choice(ADVISORY_EXCEPTIONS)
            return [EXCEPTIONS[key].to_exception()]
        return []
