import logging

from bson import ObjectId
from fastapi import APIRouter, Depends

from auth import get_current_doctor_id
from errors import ClinicError, ServerFault
from models.appointment_model import AppointmentCreate, AppointmentUpdate
from mongo import get_db
from services.appointment_service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["appointments"])


def get_appointment_service(db=Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


@router.get("", operation_id="list_appointments")
def list_appointments(
    doctor_id: ObjectId = Depends(get_current_doctor_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """
    Appointments of the logged-in doctor by date, with patient name, age and disease
    """
    try:
        appointments = service.list(doctor_id)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in list_appointments: {str(e)}")
        raise ServerFault("Server error while fetching appointments")
    return {"appointments": appointments}


@router.post("", status_code=201, operation_id="book_appointment")
def book_appointment(
    data: AppointmentCreate,
    doctor_id: ObjectId = Depends(get_current_doctor_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        appointment = service.create(doctor_id, data)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in book_appointment: {str(e)}")
        raise ServerFault("Server error while booking appointment")
    return {"message": "Appointment booked successfully", "appointment": appointment}


@router.put("/{appointment_id}", operation_id="update_appointment")
def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    doctor_id: ObjectId = Depends(get_current_doctor_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        appointment = service.update(doctor_id, appointment_id, data)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in update_appointment: {str(e)}")
        raise ServerFault("Server error while updating appointment")
    return {"message": "Appointment updated successfully", "appointment": appointment}


@router.delete("/{appointment_id}", operation_id="delete_appointment")
def delete_appointment(
    appointment_id: str,
    doctor_id: ObjectId = Depends(get_current_doctor_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        service.delete(doctor_id, appointment_id)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in delete_appointment: {str(e)}")
        raise ServerFault("Server error while deleting appointment")
    return {"message": "Appointment deleted successfully"}
