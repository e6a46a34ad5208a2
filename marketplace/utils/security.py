from fastapi import Depends

from marketplace.database import get_db
from marketplace.models.session import SessionData
from marketplace.models.user import User
from marketplace.utils.guards import Capability, can
from marketplace.utils.session import get_session
from marketplace.utils.users import resolve_user


class LoginRequired(Exception):
    """Raised when a route needs a logged-in user; answered with a redirect to /login."""


class UpgradeRequired(Exception):
    """Raised when a buyer reaches a seller route; answered with a redirect to /seller/upgrade."""


async def require_login(session: SessionData = Depends(get_session)) -> SessionData:
    if not session.is_authenticated:
        raise LoginRequired()
    return session


async def get_current_user(
    session: SessionData = Depends(require_login),
    db=Depends(get_db),
) -> User:
    user = await resolve_user(db, session)
    if user is None:
        raise LoginRequired()
    return user


async def get_current_seller(user: User = Depends(get_current_user)) -> User:
    if not can(user, Capability.MANAGE_LISTINGS):
        raise UpgradeRequired()
    return user
