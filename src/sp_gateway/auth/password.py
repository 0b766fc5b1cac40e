"""Password hashing with bcrypt.

bcrypt only reads the first 72 bytes of its input, and bcrypt>=5 raises on
longer input instead of ignoring the tail. Signup allows 100 characters, which
can be up to 400 bytes of UTF-8, so both sides cut the encoded password at
72 bytes before handing it to bcrypt.
"""

import bcrypt

BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    hashed_bytes: bytes = bcrypt.hashpw(_encode(plain), bcrypt.gensalt())
    return hashed_bytes.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
