from typing import Optional

from pydantic import BaseModel, StrictInt

from models.models import isoformat

MIN_AGE = 0
MAX_AGE = 150


class PatientCreate(BaseModel):
    name: Optional[str] = None
    age: Optional[StrictInt] = None
    disease: Optional[str] = None


class PatientUpdate(BaseModel):
    name: Optional[str] = None
    age: Optional[StrictInt] = None
    disease: Optional[str] = None


def serialize_patient(patient: dict) -> dict:
    return {
        "_id": str(patient["_id"]),
        "name": patient["name"],
        "age": patient["age"],
        "disease": patient["disease"],
        "doctor": str(patient["doctor"]),
        "createdAt": isoformat(patient.get("createdAt")),
        "updatedAt": isoformat(patient.get("updatedAt")),
    }
