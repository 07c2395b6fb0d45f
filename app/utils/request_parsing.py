"""Helpers for parsing common request parameters."""

from __future__ import annotations

from flask import current_app, request


def resolve_acting_user(body_user_id: str | None) -> str | None:
    """Return the acting user for the current request.

    The identifier in the request body wins; otherwise the header configured
    by ``ACTING_USER_HEADER`` is used. The value is opaque and never
    inspected. ``None`` means the lifecycle rules record ``Anonymous``.
    """
    if body_user_id and body_user_id.strip():
        return body_user_id.strip()

    header_name = current_app.config.get("ACTING_USER_HEADER", "X-User-Id")
    header_value = request.headers.get(header_name)
    if header_value and header_value.strip():
        return header_value.strip()
    return None


def resolve_part_id(path_part_id: str | None, *candidates: str | None) -> str | None:
    """Pick the part identifier from the URL path or the ``id`` query parameter.

    Returns ``None`` when no identifier was supplied anywhere. Additional
    candidates (such as an identifier in the body) must agree with the
    resolved one; a disagreement is reported by the caller.
    """
    part_id = path_part_id or request.args.get("id")
    if part_id:
        return part_id.strip() or None
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return None


__all__ = ["resolve_acting_user", "resolve_part_id"]
