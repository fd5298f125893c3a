"""Password hashing utilities.

bcrypt includes a random salt in every hash and its work factor is
tunable (LINKBIO_BCRYPT_ROUNDS). Passwords are truncated to 72 bytes,
bcrypt's input limit.

Both functions are CPU-bound; async callers run them through
starlette's threadpool so the event loop keeps serving requests.
"""

from functools import lru_cache

import bcrypt


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt using the given cost factor."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def dummy_hash(rounds: int = 12) -> str:
    """A throwaway hash with the same cost as real ones.

    Login checks against it when the email is unknown so a missing account
    takes as long to reject as a wrong password.
    """
    return hash_password("linkbio-dummy-password", rounds)


def burn_dummy_check(password: str, rounds: int = 12) -> bool:
    """Run a full bcrypt comparison that can never succeed."""
    verify_password(password, dummy_hash(rounds))
    return False
