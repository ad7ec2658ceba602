"""
Password hashing and session tokens.

Passwords are hashed with bcrypt using a fixed work factor. Session tokens are
HS256 JWTs carrying the doctor id as ``sub`` and expiring after one day; expiry
is the only way a token stops being valid.
"""
import binascii
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from jwt.utils import base64url_decode, base64url_encode

import config

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class InvalidToken(Exception):
    pass


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Compare a plaintext password to a stored hash, False on any mismatch"""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or oversized input
        return False


def generate_token(doctor_id, secret: Optional[str] = None, expires_in: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(doctor_id),
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else config.JWT_EXPIRES_IN),
    }
    return jwt.encode(payload, secret or config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def _is_canonical_segment(segment: str) -> bool:
    # base64url ignores trailing bits, so two spellings can decode to the same bytes
    try:
        return base64url_encode(base64url_decode(segment)).decode("ascii") == segment
    except (binascii.Error, ValueError):
        return False


def verify_token(token: str, secret: Optional[str] = None) -> str:
    """Return the subject of a valid token, raise InvalidToken otherwise"""
    if not token:
        raise InvalidToken("empty token")

    segments = token.split(".")
    if len(segments) != 3 or not all(_is_canonical_segment(s) for s in segments):
        raise InvalidToken("malformed token")

    try:
        payload = jwt.decode(
            token,
            secret or config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError as e:
        raise InvalidToken(str(e)) from e

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise InvalidToken("missing subject")
    return subject
