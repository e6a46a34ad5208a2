import os
from dotenv import load_dotenv

load_dotenv()

# =====================================================
# ENV
# =====================================================
ENV = os.getenv("ENV", "development")
APP_PORT = int(os.getenv("APP_PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# =====================================================
# DATABASE
# =====================================================
MONGODB_URI = os.getenv("MONGODB_URI") or os.getenv("MONGO_URI")
MONGODB_DEFAULT_DB = os.getenv("MONGODB_DEFAULT_DB", "marketplace")

# =====================================================
# SESSION
# =====================================================
# Used only when SESSION_SECRET is unset. Not safe outside development.
INSECURE_SESSION_SECRET = "dev_fallback_secret"

SESSION_SECRET = os.getenv("SESSION_SECRET") or INSECURE_SESSION_SECRET
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "mp_session")
SESSION_MAX_AGE_DAYS = int(os.getenv("SESSION_MAX_AGE_DAYS", 30))

# =====================================================
# UPLOADS
# =====================================================
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
IMAGE_STORAGE = os.getenv("IMAGE_STORAGE", "local").lower()  # local | cloudinary

# --------------------------------------------------
# CLOUDINARY
# --------------------------------------------------

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER", "marketplace/products")

# =====================================================
# CORS
# =====================================================
CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")


def session_secret_is_insecure() -> bool:
    return SESSION_SECRET == INSECURE_SESSION_SECRET


def validate_production_env() -> None:
    if (ENV or "").lower() != "production":
        return

    required = {
        "SESSION_SECRET": os.getenv("SESSION_SECRET"),
        "MONGODB_URI": MONGODB_URI,
    }
    if IMAGE_STORAGE == "cloudinary":
        required.update({
            "CLOUDINARY_CLOUD_NAME": CLOUDINARY_CLOUD_NAME,
            "CLOUDINARY_API_KEY": CLOUDINARY_API_KEY,
            "CLOUDINARY_API_SECRET": CLOUDINARY_API_SECRET,
        })

    invalid = []
    for key, value in required.items():
        val = (value or "").strip()
        if not val or val.startswith("CHANGE_THIS") or val == INSECURE_SESSION_SECRET:
            invalid.append(key)

    if invalid:
        raise RuntimeError(f"Production env misconfigured. Invalid keys: {', '.join(sorted(invalid))}")
