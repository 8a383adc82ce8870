"""Builders for the outbound push registration method calls."""

from __future__ import annotations

from typing import Any

from chatpush.config import settings


def build_push_update(
    registration_id: str,
    user_id: str,
    device_token: str,
    *,
    app_name: str | None = None,
    token_namespace: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Build the registration-announce call.

    Unset keyword arguments fall back to the configured values.
    """
    namespace = token_namespace or settings.push_token_namespace
    return {
        "msg": "method",
        "method": method or settings.push_update_method,
        "params": [
            {
                "id": registration_id,
                "userId": user_id,
                "token": {namespace: device_token},
                "appName": app_name or settings.get_app_name(),
                "metadata": {},
            }
        ],
    }


def build_push_setuser(
    registration_id: str,
    user_id: str,
    *,
    method: str | None = None,
) -> dict[str, Any]:
    """Build the call associating *user_id* with *registration_id*."""
    return {
        "msg": "method",
        "method": method or settings.push_setuser_method,
        "userId": user_id,
        "params": [registration_id],
    }
