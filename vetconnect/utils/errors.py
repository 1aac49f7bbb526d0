"""Custom error definitions for API exceptions."""
from typing import Dict, Optional

from fastapi import HTTPException
from starlette import status


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class StepValidationError(HTTPException):
    """Field-level validation failure; `errors` maps field name to message."""

    def __init__(self, errors: Dict[str, str], step: Optional[int] = None):
        self.errors = dict(errors)
        self.step = step
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Please fix the highlighted fields", "step": step, "errors": self.errors},
        )


class InvalidCoordinatesError(HTTPException):
    def __init__(self, detail: str = "Invalid coordinates"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class GeocodingUnavailableError(HTTPException):
    def __init__(self, detail: str = "Geocoding service unavailable"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class RemotePersistenceError(HTTPException):
    def __init__(self, detail: str = "Remote document store write failed"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class LocalPersistenceError(HTTPException):
    def __init__(self, detail: str = "Could not save clinic locally"):
        super().__init__(status_code=status.HTTP_507_INSUFFICIENT_STORAGE, detail=detail)


class ClinicNotFoundError(HTTPException):
    def __init__(self, detail: str = "Clinic not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ClinicAccessDenied(HTTPException):
    def __init__(self, detail: str = "You do not own this clinic"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class WizardNotOpenError(HTTPException):
    def __init__(self, detail: str = "No clinic registration in progress"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class WizardStepError(HTTPException):
    def __init__(self, detail: str = "Action not available on this step"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class SubmissionInProgressError(HTTPException):
    def __init__(self, detail: str = "Clinic is already being saved"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UploadRejectedError(HTTPException):
    def __init__(self, detail: str = "Upload rejected"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
