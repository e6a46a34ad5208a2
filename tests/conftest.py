import asyncio
import os
import tempfile
import uuid

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/marketplace_test")
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="marketplace-uploads-")
os.environ["IMAGE_STORAGE"] = "local"

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from marketplace.config.env import SESSION_COOKIE_NAME
from marketplace.database import get_db
from marketplace.main import app
from marketplace.models.user import Role
from marketplace.utils.hash import hash_password
from marketplace.utils.products import create_product
from marketplace.utils.session import decode_session
from marketplace.utils.users import create_user, set_user_role


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def db():
    return AsyncMongoMockClient()[f"marketplace_{uuid.uuid4().hex}"]


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app, follow_redirects=False)
    app.dependency_overrides.clear()


def make_user(db, username, password="secret-pw", email=None, phone=None, role=Role.BUYER):
    user = run(create_user(
        db,
        username=username,
        password_hash=hash_password(password),
        email=email,
        phone=phone,
    ))
    if role is not Role.BUYER:
        run(set_user_role(db, user.id, role))
        user.role = role
    return user


def make_product(db, seller_id, title="Lamp", price_cents=1500, stock=3):
    return run(create_product(
        db,
        seller_id=seller_id,
        title=title,
        description="",
        price_cents=price_cents,
        stock=stock,
    ))


def login(client, identifier, password="secret-pw"):
    resp = client.post("/login", data={"username": identifier, "password": password})
    assert resp.status_code == 303
    return resp


def session_of(client):
    return decode_session(client.cookies.get(SESSION_COOKIE_NAME))
