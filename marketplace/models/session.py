from pydantic import BaseModel, Field
from typing import Dict


class SessionData(BaseModel):
    """
    Everything a browser session carries between requests.

    Identity is kept as the email and username claims of the logged-in
    user; the cart maps product id (as string) to requested quantity.
    """

    user_email: str = ""
    user_username: str = ""
    cart: Dict[str, int] = Field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_email or self.user_username)

    @property
    def cart_count(self) -> int:
        return sum(self.cart.values())

    def login(self, user) -> None:
        self.user_email = user.email or ""
        self.user_username = user.username

    def clear(self) -> None:
        self.user_email = ""
        self.user_username = ""
        self.cart = {}

    def is_empty(self) -> bool:
        return not self.is_authenticated and not self.cart
