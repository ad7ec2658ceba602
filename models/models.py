from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from errors import ValidationError


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def _to_millis(value: datetime) -> datetime:
    # BSON dates keep millisecond precision
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utcnow() -> datetime:
    # Naive UTC, which is what pymongo hands back when reading
    return _to_millis(datetime.now(timezone.utc).replace(tzinfo=None))


def to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        try:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            # Offset pushes the instant past year 1 or 9999
            raise ValidationError("Invalid date")
    return _to_millis(value)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def serialize_doctor(doctor: dict) -> dict:
    # The password hash never leaves the service layer
    return {
        "id": str(doctor["_id"]),
        "name": doctor["name"],
        "email": doctor["email"],
    }
