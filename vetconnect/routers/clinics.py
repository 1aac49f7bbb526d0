"""Clinic endpoints for the signed-in clinic owner."""
from fastapi import APIRouter, Depends, Response, status

from vetconnect.dependencies.services import get_local_clinic_store
from vetconnect.schemas.clinic import ActiveClinicUpdate, ClinicListResponse, PersistedClinic
from vetconnect.services.local_store import LocalClinicStore
from vetconnect.utils.errors import ClinicNotFoundError

router = APIRouter(prefix="/clinics", tags=["clinics"])


@router.get("", response_model=ClinicListResponse)
def list_clinics(local: LocalClinicStore = Depends(get_local_clinic_store)):
    items = local.get_all()
    active = local.get_active()
    return ClinicListResponse(
        items=items,
        total=len(items),
        active_clinic_id=active["id"] if active else None,
    )


@router.get("/active", response_model=PersistedClinic)
def get_active_clinic(local: LocalClinicStore = Depends(get_local_clinic_store)):
    active = local.get_active()
    if not active:
        raise ClinicNotFoundError("No active clinic")
    return active


@router.put("/active", response_model=PersistedClinic)
def set_active_clinic(payload: ActiveClinicUpdate, local: LocalClinicStore = Depends(get_local_clinic_store)):
    clinic = local.get(payload.clinic_id)
    if not clinic:
        raise ClinicNotFoundError()
    local.set_active(payload.clinic_id)
    return clinic


@router.get("/{clinic_id}", response_model=PersistedClinic)
def get_clinic(clinic_id: str, local: LocalClinicStore = Depends(get_local_clinic_store)):
    clinic = local.get(clinic_id)
    if not clinic:
        raise ClinicNotFoundError()
    return clinic


@router.delete("/{clinic_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_clinic(clinic_id: str, local: LocalClinicStore = Depends(get_local_clinic_store)):
    if not local.delete(clinic_id):
        raise ClinicNotFoundError()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
