import json
import logging
from typing import Optional

from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from marketplace.config.env import SESSION_SECRET, SESSION_COOKIE_NAME, SESSION_MAX_AGE_DAYS
from marketplace.models.session import SessionData
from marketplace.utils.crypto import build_fernet, encrypt_value, decrypt_value

logger = logging.getLogger(__name__)

SESSION_MAX_AGE_SECONDS = SESSION_MAX_AGE_DAYS * 24 * 60 * 60

_fernet = build_fernet(SESSION_SECRET)


# ======================
# Codec
# ======================

def encode_session(session: SessionData) -> str:
    payload = json.dumps(session.model_dump(), separators=(",", ":"), sort_keys=True)
    return encrypt_value(_fernet, payload)


def decode_session(token: Optional[str]) -> SessionData:
    """
    Any cookie that does not decrypt to a valid session is treated as
    no session at all.
    """
    payload = decrypt_value(_fernet, token or "", ttl=SESSION_MAX_AGE_SECONDS)
    if payload is None:
        if token:
            logger.info("Discarding undecodable session cookie")
        return SessionData()
    try:
        return SessionData.model_validate_json(payload)
    except ValidationError:
        logger.warning("Discarding malformed session payload")
        return SessionData()


# ======================
# Middleware
# ======================

class SessionMiddleware(BaseHTTPMiddleware):
    """
    Loads the session cookie into request.state.session and writes it
    back only when a handler changed it.
    """

    async def dispatch(self, request: Request, call_next):
        session = decode_session(request.cookies.get(SESSION_COOKIE_NAME))
        before = session.model_dump()
        request.state.session = session

        response = await call_next(request)

        session = request.state.session
        if session.model_dump() != before:
            if session.is_empty():
                response.delete_cookie(SESSION_COOKIE_NAME, path="/", httponly=True, samesite="lax")
            else:
                response.set_cookie(
                    SESSION_COOKIE_NAME,
                    encode_session(session),
                    max_age=SESSION_MAX_AGE_SECONDS,
                    path="/",
                    httponly=True,
                    samesite="lax",
                )
        return response


def get_session(request: Request) -> SessionData:
    return request.state.session
