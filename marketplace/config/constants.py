# marketplace/config/constants.py

# -----------------------------
# PRICING
# -----------------------------

CENTS_PER_UNIT = 100
MAX_FRACTION_CENTS = 99             # "12.345" clamps to 12.99

# -----------------------------
# CART
# -----------------------------

DEFAULT_CART_QTY = 1

# -----------------------------
# UPLOADS
# -----------------------------

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}

# -----------------------------
# PASSWORDS
# -----------------------------

MAX_BCRYPT_BYTES = 72               # bcrypt hard limit

# -----------------------------
# STORAGE
# -----------------------------

# BSON int64 bounds
MIN_STORED_INT = -(2 ** 63)
MAX_STORED_INT = 2 ** 63 - 1
