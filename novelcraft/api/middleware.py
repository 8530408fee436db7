"""
Request authentication middleware.

Protected paths (``/workbench`` and ``/api``, minus the public auth
endpoints) need a valid JWT. The token is looked up in the Authorization
header, then the ``token`` cookie, then a ``token`` query parameter. Requests
without a valid token are redirected to the login page; authenticated
requests carry the verified identity on ``request.state.identity``.
"""

import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from novelcraft.core.config import settings
from novelcraft.services.auth import verify_token

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
PROTECTED_PREFIXES = ("/workbench", settings.API_PREFIX)
PUBLIC_PREFIXES = (
    "/login",
    "/register",
    f"{settings.API_PREFIX}/auth/login",
    f"{settings.API_PREFIX}/auth/register",
    f"{settings.API_PREFIX}/auth/logout",
    f"{settings.API_PREFIX}/auth/demo",
    f"{settings.API_PREFIX}/auth/passkey/status",
    f"{settings.API_PREFIX}/auth/passkey/authenticate",
)
IDENTITY_HEADERS = (b"x-user-id", b"x-username", b"x-auth-method")
EXPIRY_WARNING = timedelta(minutes=30)


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def is_protected_path(path: str) -> bool:
    if path == "/":
        return False
    if any(_matches(path, prefix) for prefix in PUBLIC_PREFIXES):
        return False
    return any(_matches(path, prefix) for prefix in PROTECTED_PREFIXES)


def extract_token(request: Request) -> str | None:
    """Bearer header first, then cookie, then query string."""
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[len("Bearer "):].strip()
        if token:
            return token

    cookie_token = request.cookies.get(settings.TOKEN_COOKIE_NAME)
    if cookie_token:
        return cookie_token

    return request.query_params.get("token") or None


def redirect_to_login(request: Request) -> RedirectResponse:
    query = urlencode({"redirect": request.url.path})
    return RedirectResponse(url=f"{LOGIN_PATH}?{query}", status_code=307)


class AuthMiddleware(BaseHTTPMiddleware):
    """Stateless JWT check in front of every protected route."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        # Never trust identity headers sent by the client
        request.scope["headers"] = [
            (name, value)
            for name, value in request.scope["headers"]
            if name not in IDENTITY_HEADERS
        ]

        if not is_protected_path(path):
            return await call_next(request)

        token = extract_token(request)
        if not token:
            logger.warning("No token for protected path %s", path)
            return redirect_to_login(request)

        identity = verify_token(token)
        if identity is None:
            logger.warning("Invalid token for protected path %s", path)
            return redirect_to_login(request)

        if identity.expires_at is not None:
            remaining = identity.expires_at - datetime.now(timezone.utc)
            if timedelta(0) < remaining < EXPIRY_WARNING:
                logger.info("Token for %s expires soon", identity.username)

        request.state.identity = identity
        request.scope["headers"].extend(
            [
                (b"x-user-id", str(identity.user_id).encode()),
                (b"x-username", identity.username.encode()),
                (b"x-auth-method", identity.auth_method.encode()),
            ]
        )
        logger.debug("Authenticated %s for %s", identity.username, path)
        return await call_next(request)
