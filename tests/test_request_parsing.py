"""Tests for request parsing utility functions."""

from flask import Flask

from app.utils.request_parsing import resolve_acting_user, resolve_part_id


def test_resolve_acting_user_prefers_body(app: Flask):
    with app.test_request_context(headers={"X-User-Id": "header-user"}):
        assert resolve_acting_user("body-user") == "body-user"


def test_resolve_acting_user_falls_back_to_header(app: Flask):
    with app.test_request_context(headers={"X-User-Id": " header-user "}):
        assert resolve_acting_user(None) == "header-user"
        assert resolve_acting_user("   ") == "header-user"


def test_resolve_acting_user_custom_header(app: Flask):
    app.config["ACTING_USER_HEADER"] = "X-Operator"
    try:
        with app.test_request_context(headers={"X-Operator": "dana", "X-User-Id": "ignored"}):
            assert resolve_acting_user(None) == "dana"
    finally:
        app.config["ACTING_USER_HEADER"] = "X-User-Id"


def test_resolve_acting_user_none_when_absent(app: Flask):
    with app.test_request_context():
        assert resolve_acting_user(None) is None


def test_resolve_part_id_from_path(app: Flask):
    with app.test_request_context("/api/parts/P1?id=other"):
        assert resolve_part_id("P1", "body") == "P1"


def test_resolve_part_id_from_query(app: Flask):
    with app.test_request_context("/api/parts?id=P2"):
        assert resolve_part_id(None, "body") == "P2"


def test_resolve_part_id_from_candidates(app: Flask):
    with app.test_request_context("/api/parts"):
        assert resolve_part_id(None, None, " P3 ") == "P3"
        assert resolve_part_id(None, "", None) is None
