import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from pydantic import ValidationError

from catalog.products.models import SessionUser

logger = logging.getLogger(__name__)

IdentityProvider = Callable[[Request], Optional[SessionUser]]


class ForbiddenError(Exception):
    pass


def session_identity(request: Request) -> Optional[SessionUser]:
    """
    Default identity provider: the login flow stores the user in the
    signed session cookie under "user".
    """
    data = request.session.get("user")
    if not data:
        return None
    try:
        return SessionUser.model_validate(data)
    except ValidationError:
        logger.warning("Ignoring malformed session user")
        return None


def get_current_user(request: Request) -> Optional[SessionUser]:
    provider: IdentityProvider = request.app.state.identity_provider
    return provider(request)


def require_role(*roles: str):
    """Dependency factory: allow the request only for users holding one of ``roles``."""

    def checker(
        request: Request,
        user: Optional[SessionUser] = Depends(get_current_user),
    ) -> SessionUser:
        if user is None or user.role not in roles:
            logger.warning(
                "Forbidden %s %s for role=%s",
                request.method,
                request.url.path,
                user.role if user else None,
            )
            raise ForbiddenError()
        return user

    return checker
