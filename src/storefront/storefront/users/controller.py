from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flask import Flask, g, request

from ..auth.decorators import build_decorators
from ..auth.tokens import TokenPair
from ..common.logging_setup import get_logger
from ..common.validators import parse_pagination
from ..container import Container
from ..core.constants import ACCESS_COOKIE, LOGOUT_COOKIE_SECONDS, REFRESH_COOKIE
from ..core.enums import Role
from ..http.payload import json_body
from ..http.responses import ok
from .model import User

log = get_logger(__name__)


def _set_cookie(response, app: Flask, name: str, value: str, ttl: timedelta) -> None:
    response.set_cookie(
        name,
        value,
        expires=datetime.now(timezone.utc) + ttl,
        httponly=True,
        secure=bool(app.config.get("COOKIE_SECURE", False)),
        samesite="Lax",
    )


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = build_decorators(container.auth_guard)

    def token_response(user: User, status: int = 200):
        pair: TokenPair = container.tokens.issue_pair(user)
        response, status = ok(user.to_public_dict(), status=status, token=pair.access_token)
        _set_cookie(response, app, ACCESS_COOKIE, pair.access_token, pair.access_ttl)
        _set_cookie(response, app, REFRESH_COOKIE, pair.refresh_token, pair.refresh_ttl)
        return response, status

    @app.route("/api/v1/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        body = json_body()
        user = container.account_service.register(
            name=body.get("name"),
            email=body.get("email"),
            password=body.get("password"),
        )
        return token_response(user, status=201)

    @app.route("/api/v1/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        body = json_body()
        user = container.account_service.authenticate(body.get("email"), body.get("password"))
        log.info("User logged in", user_id=user.user_id)
        return token_response(user)

    @app.route("/api/v1/auth/logout", methods=["GET"], endpoint="auth_logout")
    def auth_logout():
        response, status = ok(message="Logged out successfully")
        short = timedelta(seconds=LOGOUT_COOKIE_SECONDS)
        _set_cookie(response, app, ACCESS_COOKIE, "none", short)
        _set_cookie(response, app, REFRESH_COOKIE, "none", short)
        return response, status

    @app.route("/api/v1/auth/refresh-token", methods=["POST"], endpoint="auth_refresh")
    def auth_refresh():
        body = json_body()
        refresh_token = request.cookies.get(REFRESH_COOKIE) or body.get("refreshToken")
        result = container.auth_guard.refresh(refresh_token)
        response, status = ok(token=result.access_token)
        _set_cookie(response, app, ACCESS_COOKIE, result.access_token, container.tokens.access_ttl)
        return response, status

    @app.route("/api/v1/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def auth_me():
        return ok(g.current_user.to_public_dict())

    @app.route("/api/v1/auth/update-details", methods=["PUT"], endpoint="auth_update_details")
    @login_required
    def auth_update_details():
        body = json_body()
        user = container.account_service.update_details(
            g.current_user.user_id,
            name=body.get("name"),
            email=body.get("email"),
        )
        return ok(user.to_public_dict())

    @app.route("/api/v1/auth/update-password", methods=["PUT"], endpoint="auth_update_password")
    @login_required
    def auth_update_password():
        body = json_body()
        user = container.account_service.update_password(
            g.current_user.user_id,
            current_password=body.get("currentPassword"),
            new_password=body.get("newPassword"),
        )
        return token_response(user)

    @app.route("/api/v1/admin/users", methods=["GET"], endpoint="admin_list_users")
    @roles_required(Role.ADMIN)
    def admin_list_users():
        page, limit, offset = parse_pagination(request.args.get("page"), request.args.get("limit"))
        users = container.user_admin_service.list_users(limit=limit, offset=offset)
        return ok(
            [u.to_public_dict() for u in users],
            count=len(users),
            pagination={"page": page, "limit": limit},
        )

    @app.route("/api/v1/admin/users/<int:user_id>", methods=["GET"], endpoint="admin_get_user")
    @roles_required(Role.ADMIN)
    def admin_get_user(user_id: int):
        return ok(container.user_admin_service.get_user(user_id).to_public_dict())

    @app.route("/api/v1/admin/users/<int:user_id>/role", methods=["PUT"], endpoint="admin_update_role")
    @roles_required(Role.ADMIN)
    def admin_update_role(user_id: int):
        body = json_body()
        user = container.user_admin_service.update_role(
            admin_user_id=g.current_user.user_id,
            user_id=user_id,
            role=body.get("role"),
        )
        return ok(user.to_public_dict())
