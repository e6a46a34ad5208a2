from passlib.context import CryptContext

from marketplace.config.constants import MAX_BCRYPT_BYTES

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12,
)


def _too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_BCRYPT_BYTES


def hash_password(password: str) -> str:
    """Salted bcrypt hash of ``password``; raises ValueError past 72 bytes."""
    if _too_long(password):
        raise ValueError(f"Password too long (max {MAX_BCRYPT_BYTES} bytes)")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # malformed stored hashes count as a mismatch
    if _too_long(plain_password):
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False
