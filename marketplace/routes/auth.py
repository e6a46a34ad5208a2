import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from pymongo.errors import PyMongoError

from marketplace.database import get_db
from marketplace.models.session import SessionData
from marketplace.utils.hash import hash_password, verify_password
from marketplace.utils.session import get_session
from marketplace.utils.templates import render
from marketplace.utils.users import create_user, find_user_by, user_exists
from marketplace.utils.validators import identifier_field, split_contact

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


def _redirect_home():
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


# ======================
# Register
# ======================

@router.get("/register")
async def register_form(request: Request):
    return render(request, "register.html")


@router.post("/register")
async def register(
    request: Request,
    contact: str = Form(""),
    username: str = Form(""),
    password: str = Form(""),
    session: SessionData = Depends(get_session),
    db=Depends(get_db),
):
    contact = contact.strip()
    username = username.strip()

    def fail(message: str, code: int = status.HTTP_400_BAD_REQUEST):
        return render(request, "register.html", {"error": message}, status_code=code)

    if not contact or not username or not password:
        return fail("Fill all fields")

    email, phone = split_contact(contact)

    # all uniqueness checks run before anything is written
    if await user_exists(db, "username", username):
        return fail("Username taken")
    if email and await user_exists(db, "email", email):
        return fail("Email already registered")
    if phone and await user_exists(db, "phone", phone):
        return fail("Phone already registered")

    try:
        password_hash = hash_password(password)
    except ValueError as e:
        return fail(str(e))

    try:
        user = await create_user(
            db,
            username=username,
            password_hash=password_hash,
            email=email,
            phone=phone,
        )
    except PyMongoError as e:
        logger.exception("REGISTER_INSERT_ERROR")
        return fail(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

    session.login(user)
    return _redirect_home()


# ======================
# Login / Logout
# ======================

@router.get("/login")
async def login_form(request: Request):
    return render(request, "login.html")


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    session: SessionData = Depends(get_session),
    db=Depends(get_db),
):
    ident = username.strip()

    def fail(message: str, code: int):
        return render(request, "login.html", {"error": message}, status_code=code)

    if not ident or not password:
        return fail("Fill all fields", status.HTTP_400_BAD_REQUEST)

    field = identifier_field(ident)
    user = await find_user_by(db, field, ident)

    # distinct messages on purpose; they reveal which identifiers exist
    if user is None:
        logger.warning("Login failed: no user for %s", field)
        return fail("User not found", status.HTTP_401_UNAUTHORIZED)
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: wrong password for user %s", user.id)
        return fail("Wrong password", status.HTTP_401_UNAUTHORIZED)

    session.login(user)
    logger.info("User %s logged in", user.id)
    return _redirect_home()


@router.get("/logout")
async def logout(session: SessionData = Depends(get_session)):
    session.clear()
    return _redirect_home()
