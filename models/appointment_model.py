from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from models.models import isoformat

AppointmentStatus = Literal["scheduled", "completed", "cancelled"]


def _blank_to_none(value):
    # An empty date counts as not given
    if isinstance(value, str) and not value.strip():
        return None
    return value


class AppointmentCreate(BaseModel):
    patient_id: Optional[str] = Field(default=None, alias="patientId")
    date: Optional[datetime] = None  # ISO format, "2026-02-27T10:00:00Z"
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def blank_date_is_missing(cls, value):
        return _blank_to_none(value)


class AppointmentUpdate(BaseModel):
    date: Optional[datetime] = None
    notes: Optional[str] = None
    status: Optional[AppointmentStatus] = None

    @field_validator("date", mode="before")
    @classmethod
    def blank_date_is_missing(cls, value):
        return _blank_to_none(value)


def serialize_patient_summary(patient: Optional[dict]) -> Optional[dict]:
    # Dangling references render as null
    if patient is None:
        return None
    return {
        "_id": str(patient["_id"]),
        "name": patient["name"],
        "age": patient["age"],
        "disease": patient["disease"],
    }


def serialize_appointment(appointment: dict, patient: Optional[dict]) -> dict:
    return {
        "_id": str(appointment["_id"]),
        "patient": serialize_patient_summary(patient),
        "doctor": str(appointment["doctor"]),
        "date": isoformat(appointment["date"]),
        "notes": appointment.get("notes", ""),
        "status": appointment.get("status", "scheduled"),
        "createdAt": isoformat(appointment.get("createdAt")),
        "updatedAt": isoformat(appointment.get("updatedAt")),
    }
