import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ClinicError(Exception):
    """Base error carrying the HTTP status and the message shown to the client"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ClinicError):
    status_code = 400


class AlreadyExists(ClinicError):
    status_code = 400


class Unauthenticated(ClinicError):
    status_code = 401


class InvalidCredentials(ClinicError):
    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class NotFound(ClinicError):
    status_code = 404


class ServerFault(ClinicError):
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


async def clinic_error_handler(request: Request, exc: ClinicError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Field locations only, inputs may hold passwords
    fields = [".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()]
    logger.info(f"Rejected body for {request.method} {request.url.path}: {fields}")
    return JSONResponse(status_code=400, content={"message": "Invalid request body"})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error in {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(ClinicError, clinic_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
