from __future__ import annotations

from typing import Any, Optional

from flask import jsonify


def ok(data: Any = None, *, status: int = 200, message: Optional[str] = None, **extra: Any):
    body: dict = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def error(message: str, *, status: int, category: str, **extra: Any):
    body = {"success": False, "message": message, "error": category}
    body.update(extra)
    return jsonify(body), status
