import os

import pytest

from conftest import login, make_product, make_user, run
from marketplace.config.env import UPLOAD_DIR
from marketplace.models.user import Role

SELLER_GET_ROUTES = ["/seller/products", "/seller/products/new", "/seller/products/1/edit"]
SELLER_POST_ROUTES = ["/seller/products", "/seller/products/1", "/seller/products/1/delete"]


def _as_seller(client, db, username="sam", role=Role.SELLER):
    user = make_user(db, username, role=role)
    login(client, username)
    return user


def _product_form(**overrides):
    form = {"title": "Desk lamp", "description": "Warm light", "price": "12.345", "stock": "-5"}
    form.update(overrides)
    return form


@pytest.mark.parametrize("path", SELLER_GET_ROUTES)
def test_anonymous_is_sent_to_login(client, path):
    resp = client.get(path)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


@pytest.mark.parametrize("path", SELLER_GET_ROUTES)
def test_buyer_is_sent_to_upgrade_on_get(client, db, path):
    make_user(db, "bea")
    login(client, "bea")

    resp = client.get(path)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/seller/upgrade"


@pytest.mark.parametrize("path", SELLER_POST_ROUTES)
def test_buyer_is_sent_to_upgrade_on_post(client, db, path):
    make_user(db, "bea")
    login(client, "bea")

    resp = client.post(path, data=_product_form())

    assert resp.status_code == 303
    assert resp.headers["location"] == "/seller/upgrade"
    assert run(db.products.count_documents({})) == 0


def test_upgrade_flips_buyer_to_seller_and_audits(client, db):
    user = make_user(db, "bea")
    login(client, "bea")

    resp = client.get("/seller/upgrade")

    assert resp.status_code == 303
    assert resp.headers["location"] == "/seller/products"
    assert run(db.users.find_one({"_id": user.id}))["role"] == "seller"

    entry = run(db.audit_logs.find_one({"actor_id": user.id}))
    assert entry["action"] == "SELLER_UPGRADED"
    assert entry["metadata"] == {"from": "buyer", "to": "seller"}

    assert client.get("/seller/products").status_code == 200


@pytest.mark.parametrize("role", [Role.SELLER, Role.ADMIN])
def test_upgrade_is_idempotent(client, db, role):
    user = _as_seller(client, db, role=role)

    resp = client.get("/seller/upgrade")

    assert resp.status_code == 303
    assert resp.headers["location"] == "/seller/products"
    assert run(db.users.find_one({"_id": user.id}))["role"] == role.value
    assert run(db.audit_logs.count_documents({})) == 0


def test_upgrade_requires_login(client):
    resp = client.get("/seller/upgrade")
    assert resp.headers["location"] == "/login"


def test_create_product_parses_price_and_stock(client, db):
    seller = _as_seller(client, db)

    resp = client.post("/seller/products", data=_product_form())

    assert resp.status_code == 303
    assert resp.headers["location"] == "/seller/products"

    doc = run(db.products.find_one({"seller_id": seller.id}))
    assert doc["title"] == "Desk lamp"
    assert doc["price_cents"] == 1299
    assert doc["stock"] == 0
    assert doc["image_path"] == ""


def test_create_product_requires_title_price_stock(client, db):
    _as_seller(client, db)

    resp = client.post("/seller/products", data=_product_form(stock=""))

    assert resp.status_code == 400
    assert "Fill title, price, stock" in resp.text
    assert "Desk lamp" in resp.text
    assert run(db.products.count_documents({})) == 0


def test_create_product_with_image(client, db):
    _as_seller(client, db)

    resp = client.post(
        "/seller/products",
        data=_product_form(price="12"),
        files={"image": ("Photo.PNG", b"\x89PNG fake", "image/png")},
    )

    assert resp.status_code == 303
    doc = run(db.products.find_one({}))
    assert doc["price_cents"] == 1200
    assert doc["image_path"].startswith("/uploads/")
    assert doc["image_path"].endswith(".png")

    stored = os.path.join(UPLOAD_DIR, doc["image_path"].rsplit("/", 1)[1])
    with open(stored, "rb") as f:
        assert f.read() == b"\x89PNG fake"


def test_create_product_rejects_unsupported_image(client, db):
    _as_seller(client, db)

    resp = client.post(
        "/seller/products",
        data=_product_form(),
        files={"image": ("anim.gif", b"GIF89a", "image/gif")},
    )

    assert resp.status_code == 400
    assert "unsupported image format" in resp.text
    assert run(db.products.count_documents({})) == 0


def test_my_products_lists_only_own(client, db):
    other = make_user(db, "olga", role=Role.SELLER)
    make_product(db, other.id, title="Not mine")
    seller = _as_seller(client, db)
    make_product(db, seller.id, title="Mine")

    resp = client.get("/seller/products")

    assert resp.status_code == 200
    assert "Mine" in resp.text
    assert "Not mine" not in resp.text


def test_edit_form_shows_formatted_price(client, db):
    seller = _as_seller(client, db)
    product = make_product(db, seller.id, price_cents=1205)

    resp = client.get(f"/seller/products/{product.id}/edit")

    assert resp.status_code == 200
    assert "12.05" in resp.text


def test_update_product_keeps_image_without_new_upload(client, db):
    seller = _as_seller(client, db)
    product = make_product(db, seller.id)
    run(db.products.update_one({"_id": product.id}, {"$set": {"image_path": "/uploads/old.png"}}))

    resp = client.post(f"/seller/products/{product.id}", data=_product_form(title="Renamed", price="3,5", stock="4"))

    assert resp.status_code == 303
    doc = run(db.products.find_one({"_id": product.id}))
    assert doc["title"] == "Renamed"
    assert doc["price_cents"] == 305
    assert doc["stock"] == 4
    assert doc["image_path"] == "/uploads/old.png"


def test_delete_own_product(client, db):
    seller = _as_seller(client, db)
    product = make_product(db, seller.id)

    resp = client.post(f"/seller/products/{product.id}/delete")

    assert resp.status_code == 303
    assert run(db.products.find_one({"_id": product.id})) is None


@pytest.mark.parametrize("role", [Role.SELLER, Role.ADMIN])
def test_other_sellers_products_are_forbidden(client, db, role):
    owner = make_user(db, "olga", role=Role.SELLER)
    product = make_product(db, owner.id, title="Olga's lamp")
    _as_seller(client, db, role=role)

    assert client.get(f"/seller/products/{product.id}/edit").status_code == 403
    assert client.post(f"/seller/products/{product.id}", data=_product_form()).status_code == 403
    assert client.post(f"/seller/products/{product.id}/delete").status_code == 403

    doc = run(db.products.find_one({"_id": product.id}))
    assert doc["title"] == "Olga's lamp"


@pytest.mark.parametrize("product_id", ["999", "abc"])
def test_missing_product_is_not_found(client, db, product_id):
    _as_seller(client, db)

    assert client.get(f"/seller/products/{product_id}/edit").status_code == 404
    assert client.post(f"/seller/products/{product_id}", data=_product_form()).status_code == 404
    assert client.post(f"/seller/products/{product_id}/delete").status_code == 404


def test_oversized_numbers_fall_back_to_zero(client, db):
    seller = _as_seller(client, db)

    resp = client.post(
        "/seller/products",
        data=_product_form(price="99999999999999999999", stock="99999999999999999999"),
    )

    assert resp.status_code == 303
    doc = run(db.products.find_one({"seller_id": seller.id}))
    assert doc["price_cents"] == 0
    assert doc["stock"] == 0

    resp = client.post(
        f"/seller/products/{doc['_id']}",
        data=_product_form(price="5", stock="99999999999999999999"),
    )

    assert resp.status_code == 303
    doc = run(db.products.find_one({"_id": doc["_id"]}))
    assert doc["price_cents"] == 500
    assert doc["stock"] == 0


@pytest.mark.parametrize("product_id", ["99999999999999999999", "1_0"])
def test_non_canonical_path_id_is_not_found(client, db, product_id):
    seller = _as_seller(client, db)
    make_product(db, seller.id)

    assert client.get(f"/seller/products/{product_id}/edit").status_code == 404
    assert client.post(f"/seller/products/{product_id}", data=_product_form()).status_code == 404
    assert client.post(f"/seller/products/{product_id}/delete").status_code == 404
