from __future__ import annotations

from functools import wraps
from typing import Callable, Tuple

from flask import g, request

from ..core.enums import Role
from .guard import AuthGuard, extract_token


def build_decorators(guard: AuthGuard) -> Tuple[Callable, Callable]:
    """Return (login_required, roles_required) bound to a guard.

    Failures raise domain errors; the JSON error handlers turn them into
    401/403/404 responses.
    """

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = guard.authenticate(extract_token(request.headers, request.cookies))
            return view(*args, **kwargs)

        return wrapper

    def roles_required(*roles: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                guard.authorize(g.get("current_user"), roles)
                return view(*args, **kwargs)

            return login_required(wrapper)

        return decorator

    return login_required, roles_required
