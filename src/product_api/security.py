"""Shared-secret check used by both endpoints."""

import secrets
from typing import Any, Optional

from product_api.errors import AuthError


def verify_api_key(provided: Any, expected: Optional[str]) -> None:
    """
    Raise `AuthError` unless `provided` equals the configured secret exactly.

    With no secret configured every request is rejected.
    """
    if not expected or not isinstance(provided, str):
        raise AuthError()
    if not secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthError()
