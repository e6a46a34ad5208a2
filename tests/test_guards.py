import pytest

from marketplace.models.product import Product
from marketplace.models.user import InvalidRoleTransition, Role, User
from marketplace.utils.guards import Capability, can, parse_int_id


def _user(uid, role):
    return User(id=uid, username=f"u{uid}", password_hash="x", role=role)


def _product(seller_id):
    return Product(id=10, seller_id=seller_id, title="t", price_cents=100, stock=1)


@pytest.mark.parametrize("role, allowed", [
    (Role.BUYER, False),
    (Role.SELLER, True),
    (Role.ADMIN, True),
])
def test_manage_listings_needs_selling_role(role, allowed):
    assert can(_user(1, role), Capability.MANAGE_LISTINGS) is allowed


@pytest.mark.parametrize("capability", [Capability.EDIT_PRODUCT, Capability.DELETE_PRODUCT])
@pytest.mark.parametrize("role", [Role.SELLER, Role.ADMIN])
def test_only_owner_can_change_product(capability, role):
    assert can(_user(1, role), capability, _product(seller_id=1))
    assert not can(_user(2, role), capability, _product(seller_id=1))


def test_buyer_cannot_change_even_own_product():
    assert not can(_user(1, Role.BUYER), Capability.EDIT_PRODUCT, _product(seller_id=1))


def test_missing_user_or_resource():
    assert not can(None, Capability.MANAGE_LISTINGS)
    assert not can(_user(1, Role.SELLER), Capability.DELETE_PRODUCT, None)


def test_role_transitions():
    assert Role.BUYER.upgrade_to_seller() is Role.SELLER
    with pytest.raises(InvalidRoleTransition):
        Role.SELLER.upgrade_to_seller()
    with pytest.raises(InvalidRoleTransition):
        Role.ADMIN.upgrade_to_seller()


def test_role_parse():
    assert Role.parse("Seller") is Role.SELLER
    assert Role.parse(None) is Role.BUYER
    assert Role.parse("superuser") is Role.BUYER


def test_parse_int_id():
    assert parse_int_id("12") == 12
    assert parse_int_id(" 3 ") == 3
    assert parse_int_id("abc") is None
    assert parse_int_id(None) is None


@pytest.mark.parametrize("raw", ["1_0", "٣", "-1", "+4", "1.0", "99999999999999999999"])
def test_parse_int_id_rejects_non_canonical_ids(raw):
    assert parse_int_id(raw) is None


def test_parse_int_id_bounds():
    assert parse_int_id("9223372036854775807") == 9223372036854775807
    assert parse_int_id("9223372036854775808") is None
    assert parse_int_id(7) == 7
