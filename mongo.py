from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient

import config

DOCTORS = "Doctors"
PATIENTS = "Patients"
APPOINTMENTS = "Appointments"

client = MongoClient(config.MONGO_URI, serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS)

# Access DB
db = client[config.MONGO_DB_NAME]


def get_db():
    """FastAPI dependency returning the clinic database"""
    return db


def ensure_indexes(database):
    # Email uniqueness is enforced by the store, the registration pre-check only gives a nicer path
    database[DOCTORS].create_index("email", unique=True)
    database[PATIENTS].create_index([("doctor", ASCENDING), ("createdAt", DESCENDING)])
    database[APPOINTMENTS].create_index([("doctor", ASCENDING), ("date", ASCENDING)])
    database[APPOINTMENTS].create_index("patient")


def parse_object_id(value):
    """ObjectId for a client supplied id, None when it cannot be one"""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None
