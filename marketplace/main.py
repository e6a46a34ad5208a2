import logging
import os

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

# ENV
from marketplace.config.env import (
    APP_PORT,
    CORS_ALLOWED_ORIGINS,
    ENV,
    LOG_LEVEL,
    UPLOAD_DIR,
    UPLOAD_URL_PREFIX,
    session_secret_is_insecure,
    validate_production_env,
)
from marketplace.database import get_db

# ROUTES
from marketplace.routes.auth import router as auth_router
from marketplace.routes.cart import router as cart_router
from marketplace.routes.public import router as public_router
from marketplace.routes.seller import router as seller_router

from marketplace.utils.indexes import ensure_indexes
from marketplace.utils.security import LoginRequired, UpgradeRequired
from marketplace.utils.session import SessionMiddleware

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("marketplace")

validate_production_env()
logger.info("ENV: %s", ENV)
if session_secret_is_insecure():
    logger.warning("SESSION_SECRET is not set; using the insecure development fallback")

app = FastAPI(
    title="Marketplace",
    version="1.0.0",
    docs_url=None if ENV == "production" else "/docs",
    redoc_url=None if ENV == "production" else "/redoc",
    openapi_url=None if ENV == "production" else "/openapi.json",
)

# -----------------------------
# SESSION + CORS
# -----------------------------

app.add_middleware(SessionMiddleware)

allowed_origins = [origin.strip() for origin in CORS_ALLOWED_ORIGINS if origin.strip()]
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

# -----------------------------
# AUTH REDIRECTS
# -----------------------------

@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(UpgradeRequired)
async def upgrade_required_handler(request: Request, exc: UpgradeRequired):
    return RedirectResponse("/seller/upgrade", status_code=status.HTTP_303_SEE_OTHER)

# -----------------------------
# ROUTES
# -----------------------------

app.include_router(public_router)
app.include_router(auth_router)
app.include_router(seller_router)
app.include_router(cart_router)

os.makedirs(UPLOAD_DIR, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=UPLOAD_DIR), name="uploads")

# -----------------------------
# HEALTH CHECKS
# -----------------------------

@app.get("/health")
async def health(db=Depends(get_db)):
    try:
        await db.command("ping")
    except Exception as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse({"ok": False, "db": str(e)}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return {"ok": True}

# -----------------------------
# STARTUP
# -----------------------------

@app.on_event("startup")
async def bootstrap_indexes():
    await ensure_indexes(get_db())


if __name__ == "__main__":
    import uvicorn

    logger.info("Server listening on :%s", APP_PORT)
    uvicorn.run("marketplace.main:app", host="0.0.0.0", port=APP_PORT)
