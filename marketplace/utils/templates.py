import os

from fastapi import Request
from fastapi.templating import Jinja2Templates

from marketplace.utils.validators import format_price

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["price"] = format_price


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    """
    Render a page with the header data every page shows:
    who is logged in and how many items sit in the cart.
    """
    session = request.state.session
    data = {
        "user_email": session.user_email,
        "user_username": session.user_username,
        "cart_count": session.cart_count,
    }
    data.update(context or {})
    return templates.TemplateResponse(request, name, data, status_code=status_code)
