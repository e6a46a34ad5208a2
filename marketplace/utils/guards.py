import re
from enum import Enum
from typing import Optional

from marketplace.models.product import Product
from marketplace.models.user import User
from marketplace.utils.validators import fits_stored_int

ID_REGEX = re.compile(r"[0-9]+")

# -------------------------------
# Id Guard
# -------------------------------

def parse_int_id(value) -> Optional[int]:
    if value is None:
        return None
    raw = str(value).strip()
    if not ID_REGEX.fullmatch(raw):
        return None
    pid = int(raw)
    return pid if fits_stored_int(pid) else None


# -------------------------------
# Capabilities
# -------------------------------

class Capability(str, Enum):
    MANAGE_LISTINGS = "manage_listings"
    EDIT_PRODUCT = "edit_product"
    DELETE_PRODUCT = "delete_product"


OWNER_ONLY = {Capability.EDIT_PRODUCT, Capability.DELETE_PRODUCT}


def can(user: Optional[User], capability: Capability, resource: Optional[Product] = None) -> bool:
    """
    Single authorization predicate for seller actions.

    Listing requires a selling role. Editing and deleting additionally
    require owning the product; an admin gets no exemption.
    """
    if user is None or not user.role.can_sell:
        return False

    if capability in OWNER_ONLY:
        return resource is not None and resource.seller_id == user.id

    return capability is Capability.MANAGE_LISTINGS
