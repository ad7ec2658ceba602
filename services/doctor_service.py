import logging
from functools import lru_cache

from pymongo.errors import DuplicateKeyError

from errors import AlreadyExists, InvalidCredentials, ValidationError
from models.models import serialize_doctor, utcnow
from mongo import DOCTORS
from security import MAX_PASSWORD_BYTES, generate_token, hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class DoctorService:
    """Registration and login against the Doctors collection"""

    def __init__(self, db):
        self.doctors = db[DOCTORS]

    def _find_by_email(self, email: str):
        return self.doctors.find_one({"email": email})

    def register(self, name, email, password) -> dict:
        if not name or not name.strip() or not email or not email.strip() or not password:
            raise ValidationError("Please provide all fields")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError("Password is too long")

        normalized_email = normalize_email(email)
        if self._find_by_email(normalized_email):
            raise AlreadyExists("Email already registered")

        now = utcnow()
        doctor = {
            "name": name.strip(),
            "email": normalized_email,
            # Hashed here, once, before the record is stored
            "password": hash_password(password),
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = self.doctors.insert_one(doctor)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration for the same email
            raise AlreadyExists("Email already registered")

        doctor["_id"] = result.inserted_id
        logger.info(f"Registered doctor {doctor['_id']}")
        return {
            "token": generate_token(doctor["_id"]),
            "doctor": serialize_doctor(doctor),
        }

    def login(self, email, password) -> dict:
        if not email or not email.strip() or not password:
            raise ValidationError("Please provide email and password")

        doctor = self._find_by_email(normalize_email(email))
        # Same error, and the same bcrypt cost, for unknown email and wrong password
        if not doctor:
            verify_password(password, _dummy_hash())
            raise InvalidCredentials()
        if not verify_password(password, doctor.get("password", "")):
            raise InvalidCredentials()

        logger.info(f"Doctor {doctor['_id']} logged in")
        return {
            "token": generate_token(doctor["_id"]),
            "doctor": serialize_doctor(doctor),
        }
