"""bcrypt password hashing."""

import bcrypt

from app.core_settings import get_settings

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]

def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password is required.")
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

def verify_password(password: str, stored: str) -> bool:
    if not password or not stored:
        return False
    try:
        return bcrypt.checkpw(_encode(password), stored.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False
