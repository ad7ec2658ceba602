import logging

from pymongo import DESCENDING, ReturnDocument

from errors import NotFound, ValidationError
from models.models import utcnow
from models.patient_model import MAX_AGE, MIN_AGE, PatientCreate, PatientUpdate, serialize_patient
from mongo import APPOINTMENTS, PATIENTS, parse_object_id

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Patient not found or access denied"


def _clean_text(value, field):
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"{field} cannot be empty")
    return cleaned


def _check_age(age):
    if age < MIN_AGE or age > MAX_AGE:
        raise ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE}")
    return age


class PatientService:
    """
    Patient CRUD scoped to one doctor.

    Every query carries ``doctor: doctor_id`` so that a record owned by another
    doctor behaves exactly like a record that does not exist.
    """

    def __init__(self, db):
        self.patients = db[PATIENTS]
        self.appointments = db[APPOINTMENTS]

    def _scoped(self, doctor_id, patient_id):
        oid = parse_object_id(patient_id)
        if oid is None:
            return None
        return {"_id": oid, "doctor": doctor_id}

    def list(self, doctor_id) -> list:
        cursor = self.patients.find({"doctor": doctor_id}).sort(
            [("createdAt", DESCENDING), ("_id", DESCENDING)]
        )
        return [serialize_patient(p) for p in cursor]

    def get_owned(self, doctor_id, patient_id):
        """Raw patient document if it belongs to doctor_id, else None"""
        query = self._scoped(doctor_id, patient_id)
        if query is None:
            return None
        return self.patients.find_one(query)

    def create(self, doctor_id, data: PatientCreate) -> dict:
        if not data.name or not data.name.strip() or data.age is None or not data.disease or not data.disease.strip():
            raise ValidationError("Please provide name, age, and disease")

        now = utcnow()
        patient = {
            "name": data.name.strip(),
            "age": _check_age(data.age),
            "disease": data.disease.strip(),
            "doctor": doctor_id,
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.patients.insert_one(patient)
        patient["_id"] = result.inserted_id
        return serialize_patient(patient)

    def update(self, doctor_id, patient_id, data: PatientUpdate) -> dict:
        query = self._scoped(doctor_id, patient_id)
        if query is None or self.patients.find_one(query) is None:
            raise NotFound(NOT_FOUND_MESSAGE)

        changes = {}
        if data.name is not None:
            changes["name"] = _clean_text(data.name, "Name")
        if data.age is not None:
            changes["age"] = _check_age(data.age)
        if data.disease is not None:
            changes["disease"] = _clean_text(data.disease, "Disease")
        changes["updatedAt"] = utcnow()

        updated = self.patients.find_one_and_update(
            query, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        if updated is None:
            # Deleted between the lookup and the write
            raise NotFound(NOT_FOUND_MESSAGE)
        return serialize_patient(updated)

    def delete(self, doctor_id, patient_id):
        query = self._scoped(doctor_id, patient_id)
        deleted = self.patients.find_one_and_delete(query) if query else None
        if deleted is None:
            raise NotFound(NOT_FOUND_MESSAGE)

        # Appointments go with their patient
        result = self.appointments.delete_many({"patient": deleted["_id"], "doctor": doctor_id})
        if result.deleted_count:
            logger.info(f"Removed {result.deleted_count} appointment(s) of deleted patient {deleted['_id']}")
