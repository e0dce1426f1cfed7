"""Utility helpers package."""

from .logging import configure_logging
from .security import require_api_key, require_customer_id, require_requestor_id

__all__ = ["configure_logging", "require_api_key", "require_customer_id", "require_requestor_id"]
