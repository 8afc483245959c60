"""
Password hashing for stored credentials.

New credentials are salted pbkdf2_sha256 hashes. Data exported by the older
browser client carries a bare 32-bit string checksum instead; those values
still verify so that imported accounts can log in, and are reported as
needing a rehash so the store can replace them on the next successful login.
"""

from __future__ import annotations

import hmac
import re

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_LEGACY_PATTERN = re.compile(r"-?\d+")


def legacy_checksum(password: str) -> str:
    """Signed 32-bit ``h * 31 + unit`` over the UTF-16 code units, as a decimal string."""
    data = password.encode("utf-16-le")
    value = 0
    for i in range(0, len(data), 2):
        unit = int.from_bytes(data[i : i + 2], "little")
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return str(value)


def is_legacy_hash(stored: str) -> bool:
    return bool(_LEGACY_PATTERN.fullmatch(stored))


def hash_password(password: str) -> str:
    """Hash a password for storing."""
    return pwd_context.hash(password)


def verify_password(password: str, stored: str) -> bool:
    """Verify a password against its stored hash, legacy checksums included."""
    if is_legacy_hash(stored):
        return hmac.compare_digest(legacy_checksum(password), stored)
    try:
        return pwd_context.verify(password, stored)
    except (ValueError, TypeError):
        # Unrecognised or malformed hash
        return False


def needs_rehash(stored: str) -> bool:
    if is_legacy_hash(stored):
        return True
    try:
        return pwd_context.needs_update(stored)
    except (ValueError, TypeError):
        return True


__all__ = [
    "hash_password",
    "is_legacy_hash",
    "legacy_checksum",
    "needs_rehash",
    "verify_password",
]
