import logging

from pymongo import ASCENDING, ReturnDocument

from errors import NotFound, ValidationError
from models.appointment_model import AppointmentCreate, AppointmentUpdate, serialize_appointment
from models.models import to_utc_naive, utcnow
from mongo import APPOINTMENTS, PATIENTS, parse_object_id
from services.patient_service import PatientService

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Appointment not found or access denied"
PATIENT_NOT_FOUND_MESSAGE = "Patient not found or does not belong to you"

# Patient fields copied into appointment responses
PATIENT_SUMMARY = {"name": 1, "age": 1, "disease": 1}


class AppointmentService:
    """Appointment CRUD scoped to one doctor, with the patient reference expanded on output"""

    def __init__(self, db):
        self.appointments = db[APPOINTMENTS]
        self.patients = db[PATIENTS]
        self.patient_service = PatientService(db)

    def _scoped(self, doctor_id, appointment_id):
        oid = parse_object_id(appointment_id)
        if oid is None:
            return None
        return {"_id": oid, "doctor": doctor_id}

    def _expand(self, appointments: list, doctor_id) -> list:
        patient_ids = list({a["patient"] for a in appointments})
        patients = {}
        if patient_ids:
            cursor = self.patients.find({"_id": {"$in": patient_ids}, "doctor": doctor_id}, PATIENT_SUMMARY)
            patients = {p["_id"]: p for p in cursor}
        return [serialize_appointment(a, patients.get(a["patient"])) for a in appointments]

    def list(self, doctor_id) -> list:
        cursor = self.appointments.find({"doctor": doctor_id}).sort([("date", ASCENDING), ("_id", ASCENDING)])
        return self._expand(list(cursor), doctor_id)

    def create(self, doctor_id, data: AppointmentCreate) -> dict:
        if not data.patient_id or data.date is None:
            raise ValidationError("Please provide patientId and date")

        # The patient must belong to the caller; foreign and unknown ids look the same
        patient = self.patient_service.get_owned(doctor_id, data.patient_id)
        if patient is None:
            raise NotFound(PATIENT_NOT_FOUND_MESSAGE)

        now = utcnow()
        appointment = {
            "patient": patient["_id"],
            "doctor": doctor_id,
            "date": to_utc_naive(data.date),
            "notes": (data.notes or "").strip(),
            "status": "scheduled",
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.appointments.insert_one(appointment)
        appointment["_id"] = result.inserted_id
        return serialize_appointment(appointment, patient)

    def update(self, doctor_id, appointment_id, data: AppointmentUpdate) -> dict:
        query = self._scoped(doctor_id, appointment_id)
        if query is None or self.appointments.find_one(query) is None:
            raise NotFound(NOT_FOUND_MESSAGE)

        changes = {}
        if data.date is not None:
            changes["date"] = to_utc_naive(data.date)
        if data.notes is not None:
            changes["notes"] = data.notes.strip()
        if data.status is not None:
            changes["status"] = data.status
        changes["updatedAt"] = utcnow()

        updated = self.appointments.find_one_and_update(
            query, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        if updated is None:
            raise NotFound(NOT_FOUND_MESSAGE)
        return self._expand([updated], doctor_id)[0]

    def delete(self, doctor_id, appointment_id):
        query = self._scoped(doctor_id, appointment_id)
        deleted = self.appointments.find_one_and_delete(query) if query else None
        if deleted is None:
            raise NotFound(NOT_FOUND_MESSAGE)
