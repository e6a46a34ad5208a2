import base64
import hashlib
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken


def build_fernet(secret: str) -> Fernet:
    seed = (secret or "").strip()
    if not seed:
        raise RuntimeError("Encryption secret is not configured")
    key = base64.urlsafe_b64encode(hashlib.sha256(seed.encode("utf-8")).digest())
    return Fernet(key)


def encrypt_value(fernet: Fernet, value: str) -> str:
    token = fernet.encrypt(value.encode("utf-8"))
    return token.decode("utf-8")


def decrypt_value(fernet: Fernet, token: str, ttl: Optional[int] = None) -> Optional[str]:
    """
    Returns None for tampered, expired or foreign tokens.
    """
    if not token:
        return None
    try:
        raw = fernet.decrypt(token.encode("utf-8"), ttl=ttl)
    except InvalidToken:
        return None
    return raw.decode("utf-8")
