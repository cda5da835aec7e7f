"""Shared route dependencies."""

from fastapi import Request

from wortschatz.config import settings
from wortschatz.errors import AuthenticationError, ConfigurationError


def require_session(request: Request) -> None:
    """Allow the request only if it carries the session cookie set at login."""
    if request.cookies.get(settings.auth_cookie_name) != "1":
        raise AuthenticationError("unauthorized")


def require_ai_session(request: Request) -> None:
    """Gate for review and completion; closed while no admin password is configured."""
    if not settings.admin_password:
        raise ConfigurationError("AI login is not configured")
    require_session(request)
