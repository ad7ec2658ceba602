import logging

from fastapi import APIRouter, Depends

from errors import ClinicError, ServerFault
from models.models import LoginRequest, RegisterRequest
from mongo import get_db
from services.doctor_service import DoctorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_doctor_service(db=Depends(get_db)) -> DoctorService:
    return DoctorService(db)


@router.post("/register", status_code=201, operation_id="register_doctor")
def register(data: RegisterRequest, service: DoctorService = Depends(get_doctor_service)):
    """
    Create a doctor account and log it in right away
    """
    try:
        result = service.register(data.name, data.email, data.password)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in register: {str(e)}")
        raise ServerFault("Server error during registration")
    return {"message": "Doctor registered successfully", **result}


@router.post("/login", operation_id="login_doctor")
def login(data: LoginRequest, service: DoctorService = Depends(get_doctor_service)):
    try:
        result = service.login(data.email, data.password)
    except ClinicError:
        raise
    except Exception as e:
        logger.error(f"Error in login: {str(e)}")
        raise ServerFault("Server error during login")
    return {"message": "Login successful", **result}
