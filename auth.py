import logging
from typing import Optional

from bson import ObjectId
from fastapi import Header

from errors import Unauthenticated
from security import InvalidToken, verify_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer"


def get_current_doctor_id(authorization: Optional[str] = Header(None)) -> ObjectId:
    """
    Resolve the doctor making the request from an ``Authorization: Bearer <token>``
    header. Routes receive the returned id and pass it to the services, which scope
    every query by it.
    """
    token = None
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme == BEARER_PREFIX:
            token = credentials.strip()

    if not token:
        raise Unauthenticated("Not authorized, no token")

    try:
        subject = verify_token(token)
    except InvalidToken as e:
        logger.info(f"Token rejected: {str(e)}")
        raise Unauthenticated("Not authorized, token failed")

    if not ObjectId.is_valid(subject):
        raise Unauthenticated("Not authorized, token failed")

    return ObjectId(subject)
