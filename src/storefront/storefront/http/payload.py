from __future__ import annotations

from flask import request


def json_body() -> dict:
    """The request's JSON object, or {} when the body is missing, malformed or not an object."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
