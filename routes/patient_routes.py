import logging

from bson import ObjectId
from fastapi import APIRouter, Depends

from auth import get_current_doctor_id
from errors import ClinicError, ServerFault
from models.patient_model import PatientCreate, PatientUpdate
from mongo import get_db
from services.patient_service import PatientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/patients", tags=["patients"])


def get_patient_service(db=Depends(get_db)) -> PatientService:
    return PatientService(db)


@router.get("", operation_id="list_patients")
def list_patients(
    doctor_id: ObjectId = Depends(get_current_doctor_id),
    service: PatientService = Depends(get_patient_service),
):
    """
    All patients of the logged-in doctor, newest first
    """
    try:
        patients = service.list(doctor_id)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in list_patients: {str(e)}")
        raise ServerFault("Server error while fetching patients")
    return {"patients": patients}


@router.post("", status_code=201, operation_id="add_patient")
def add_patient(
    data: PatientCreate,
    doctor_id: ObjectId = Depends(get_current_doctor_id),
    service: PatientService = Depends(get_patient_service),
):
    try:
        patient = service.create(doctor_id, data)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in add_patient: {str(e)}")
        raise ServerFault("Server error while adding patient")
    return {"message": "Patient added successfully", "patient": patient}


@router.put("/{patient_id}", operation_id="update_patient")
def update_patient(
    patient_id: str,
    data: PatientUpdate,
    doctor_id: ObjectId = Depends(get_current_doctor_id),
    service: PatientService = Depends(get_patient_service),
):
    """
    Apply only the fields present in the body
    """
    try:
        patient = service.update(doctor_id, patient_id, data)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in update_patient: {str(e)}")
        raise ServerFault("Server error while updating patient")
    return {"message": "Patient updated successfully", "patient": patient}


@router.delete("/{patient_id}", operation_id="delete_patient")
def delete_patient(
    patient_id: str,
    doctor_id: ObjectId = Depends(get_current_doctor_id),
    service: PatientService = Depends(get_patient_service),
):
    try:
        service.delete(doctor_id, patient_id)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in delete_patient: {str(e)}")
        raise ServerFault("Server error while deleting patient")
    return {"message": "Patient deleted successfully"}
