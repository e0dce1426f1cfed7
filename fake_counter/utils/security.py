"""Credential checks performed before a request reaches the report engine."""
from __future__ import annotations

from typing import Callable, List, Optional

from fastapi import Query

from ..config import get_settings
from ..models import NotAuthorized


def _check(value: Optional[str], valid: List[str], field: str, entry_key: str) -> None:
    if not value:
        raise NotAuthorized("not_enough_information", data=f"{field} is required")
    if value not in valid:
        raise NotAuthorized(entry_key, data=f"{field} '{value}' is not authorized")


def require_customer_id(valid: Optional[List[str]] = None) -> Callable[..., Optional[str]]:
    """Dependency rejecting requests without an accepted ``customer_id``."""

    def dependency(customer_id: Optional[str] = Query(None)) -> Optional[str]:
        _check(customer_id, valid or get_settings().valid_customer_ids, "customer_id", "customer_not_authorized")
        return customer_id

    return dependency


def require_requestor_id(valid: Optional[List[str]] = None) -> Callable[..., Optional[str]]:
    def dependency(requestor_id: Optional[str] = Query(None)) -> Optional[str]:
        _check(requestor_id, valid or get_settings().valid_requestor_ids, "requestor_id", "requestor_not_authorized")
        return requestor_id

    return dependency


def require_api_key(valid: Optional[List[str]] = None) -> Callable[..., Optional[str]]:
    def dependency(api_key: Optional[str] = Query(None)) -> Optional[str]:
        _check(api_key, valid or get_settings().valid_api_keys, "api_key", "api_not_authorized")
        return api_key

    return dependency
