"""
Notebox Backend — Password Hashing
===================================

What:  Salted one-way hashing and verification of raw passwords.
How:   bcrypt (per-password random salt embedded in the hash, cost factor
       from settings.bcrypt_rounds). Hashing runs in a worker thread via
       asyncio.to_thread so it does not stall the event loop.

bcrypt only considers the first 72 bytes of a password; longer passwords
are rejected up front instead of being silently truncated.
"""

import asyncio
from functools import lru_cache

import bcrypt

from notebox.config import settings
from notebox.exceptions import BadInputError

MAX_PASSWORD_BYTES = 72


def _encode(raw_password: str) -> bytes:
    encoded = raw_password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise BadInputError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return encoded


def _hash_sync(raw_password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(raw_password), salt).decode("ascii")


def _verify_sync(raw_password: str, password_hash: str) -> bool:
    try:
        encoded = _encode(raw_password)
    except BadInputError:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("ascii"))


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _hash_sync("notebox-timing-equalizer")


async def hash_password(raw_password: str) -> str:
    """Returns the bcrypt hash of `raw_password`."""
    return await asyncio.to_thread(_hash_sync, raw_password)


async def verify_password(raw_password: str, password_hash: str) -> bool:
    """Constant-time comparison of `raw_password` against a stored hash."""
    return await asyncio.to_thread(_verify_sync, raw_password, password_hash)


async def burn_verification(raw_password: str) -> None:
    """
    Spends the same work as a real verification and discards the result.

    Used when the username is unknown, so response time does not reveal
    whether an account exists.
    """
    await asyncio.to_thread(_verify_sync, raw_password, _dummy_hash())
