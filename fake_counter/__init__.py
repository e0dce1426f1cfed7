"""Fake COUNTER 5 SUSHI endpoint serving schema-conformant random usage reports."""

from .config import get_settings

__all__ = ["get_settings"]
