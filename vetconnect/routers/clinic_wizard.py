"""Clinic registration wizard endpoints."""
from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, Query, Response, UploadFile, status

from vetconnect.core.constants import WizardMode
from vetconnect.dependencies.auth import get_current_clinic_owner
from vetconnect.dependencies.rate_limit import rate_limit
from vetconnect.dependencies.services import (
    get_clinic_writer,
    get_geocoder,
    get_wizard_registry,
)
from vetconnect.schemas.clinic import (
    DraftUpdate,
    GeocodeResult,
    LocationSelection,
    Veterinarian,
    VeterinarianCreate,
)
from vetconnect.schemas.wizard import (
    ServiceSearchRequest,
    ServiceToggleRequest,
    WizardJumpRequest,
    WizardOpenRequest,
    WizardState,
    WizardSubmitResponse,
)
from vetconnect.services.clinic_writer import ClinicWriter, check_owner
from vetconnect.services.geocoding_service import GeocodingService
from vetconnect.services.media_service import upload_clinic_image
from vetconnect.services.wizard_service import ClinicWizard, WizardRegistry
from vetconnect.utils.coordinates import normalize
from vetconnect.utils.errors import ClinicNotFoundError

router = APIRouter(prefix="/clinic-wizard", tags=["clinic-wizard"])


def get_open_wizard(
    current_user=Depends(get_current_clinic_owner),
    registry: WizardRegistry = Depends(get_wizard_registry),
) -> ClinicWizard:
    return registry.get(current_user["sub"])


# ---------------- Lifecycle ----------------

@router.post("/open", response_model=WizardState)
def open_wizard(
    payload: WizardOpenRequest,
    current_user=Depends(get_current_clinic_owner),
    registry: WizardRegistry = Depends(get_wizard_registry),
    writer: ClinicWriter = Depends(get_clinic_writer),
):
    existing = None
    if payload.clinic_id:
        existing = writer.find(payload.clinic_id)
        if existing is None:
            raise ClinicNotFoundError()
        check_owner(existing, current_user["sub"])
    wizard = registry.open(current_user["sub"], existing)
    return wizard.snapshot()


@router.get("", response_model=WizardState)
def get_wizard_state(wizard: ClinicWizard = Depends(get_open_wizard)):
    return wizard.snapshot()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def cancel_wizard(
    current_user=Depends(get_current_clinic_owner),
    wizard: ClinicWizard = Depends(get_open_wizard),
    registry: WizardRegistry = Depends(get_wizard_registry),
):
    wizard.cancel()
    registry.discard(current_user["sub"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/draft", response_model=WizardState)
def update_draft(payload: DraftUpdate, wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.update(**payload.model_dump(exclude_unset=True))
    return wizard.snapshot()


# ---------------- Navigation ----------------

@router.post("/next", response_model=WizardState)
def next_step(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.next()
    return wizard.snapshot()


@router.post("/previous", response_model=WizardState)
def previous_step(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.previous()
    return wizard.snapshot()


@router.post("/jump", response_model=WizardState)
def jump_to_step(payload: WizardJumpRequest, wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.jump(payload.step)
    return wizard.snapshot()


# ---------------- Map picker ----------------

@router.post("/map/open", response_model=WizardState)
def open_map(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.open_map()
    return wizard.snapshot()


@router.post("/map/close", response_model=WizardState)
def close_map(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.close_map()
    return wizard.snapshot()


@router.get("/map/search", response_model=GeocodeResult)
async def search_location(
    q: str = Query(..., min_length=1),
    wizard: ClinicWizard = Depends(get_open_wizard),
    geocoder: GeocodingService = Depends(get_geocoder),
    _: None = Depends(rate_limit),
):
    result = await geocoder.forward_geocode(q)
    if result is None:
        raise HTTPException(status_code=404, detail="Location not found. Please try a different search term.")
    return result


@router.post("/map/location", response_model=WizardState)
async def select_location(
    payload: LocationSelection,
    wizard: ClinicWizard = Depends(get_open_wizard),
    geocoder: GeocodingService = Depends(get_geocoder),
):
    coords = normalize(payload.position)
    address = (payload.address or "").strip()
    if not address:
        address = await geocoder.reverse_geocode(coords.latitude, coords.longitude)
    wizard.select_location(address, coords)
    return wizard.snapshot()


# ---------------- Services dialog ----------------

@router.post("/services/open", response_model=WizardState)
def open_services(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.open_services()
    return wizard.snapshot()


@router.post("/services/search", response_model=WizardState)
def search_services(payload: ServiceSearchRequest, wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.search_services(payload.query)
    return wizard.snapshot()


@router.post("/services/toggle", response_model=WizardState)
def toggle_service(payload: ServiceToggleRequest, wizard: ClinicWizard = Depends(get_open_wizard)):
    try:
        wizard.toggle_service(payload.service)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return wizard.snapshot()


@router.post("/services/select-all", response_model=WizardState)
def select_all_services(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.select_all_services()
    return wizard.snapshot()


@router.post("/services/deselect-all", response_model=WizardState)
def deselect_all_services(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.deselect_all_services()
    return wizard.snapshot()


@router.post("/services/confirm", response_model=WizardState)
def confirm_services(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.confirm_services()
    return wizard.snapshot()


@router.post("/services/cancel", response_model=WizardState)
def cancel_services(wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.cancel_services()
    return wizard.snapshot()


@router.post("/services/remove", response_model=WizardState)
def remove_service(payload: ServiceToggleRequest, wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.remove_service(payload.service)
    return wizard.snapshot()


# ---------------- Veterinarians ----------------

@router.post("/veterinarians", response_model=Veterinarian, status_code=status.HTTP_201_CREATED)
def add_veterinarian(payload: VeterinarianCreate, wizard: ClinicWizard = Depends(get_open_wizard)):
    return wizard.add_veterinarian(
        name=payload.name,
        specialization=payload.specialization,
        phone=payload.phone,
        email=payload.email,
    )


@router.delete("/veterinarians/{vet_id}", response_model=WizardState)
def remove_veterinarian(vet_id: str, wizard: ClinicWizard = Depends(get_open_wizard)):
    if not wizard.remove_veterinarian(vet_id):
        raise HTTPException(status_code=404, detail="Veterinarian not found")
    return wizard.snapshot()


# ---------------- Photos ----------------

@router.post("/photos/profile", response_model=WizardState)
async def upload_profile_picture(
    file: UploadFile = File(...),
    wizard: ClinicWizard = Depends(get_open_wizard),
):
    url = await upload_clinic_image(file, folder="profile")
    wizard.set_profile_picture(url)
    return wizard.snapshot()


@router.post("/photos/gallery", response_model=WizardState)
async def upload_gallery_photo(
    file: UploadFile = File(...),
    wizard: ClinicWizard = Depends(get_open_wizard),
):
    wizard.ensure_gallery_capacity()
    url = await upload_clinic_image(file, folder="gallery")
    wizard.add_gallery_photo(url)
    return wizard.snapshot()


@router.delete("/photos/gallery/{index}", response_model=WizardState)
def remove_gallery_photo(index: int, wizard: ClinicWizard = Depends(get_open_wizard)):
    wizard.remove_gallery_photo(index)
    return wizard.snapshot()


# ---------------- Submit ----------------

@router.post("/submit", response_model=WizardSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_wizard(
    background_tasks: BackgroundTasks,
    current_user=Depends(get_current_clinic_owner),
    wizard: ClinicWizard = Depends(get_open_wizard),
    registry: WizardRegistry = Depends(get_wizard_registry),
    writer: ClinicWriter = Depends(get_clinic_writer),
    _: None = Depends(rate_limit),
):
    mode = wizard.mode
    record = await wizard.submit(writer, current_user, defer_mirror=True)
    registry.discard(current_user["sub"])

    # the response does not wait for the remote copy
    background_tasks.add_task(writer.outbox.flush)

    message = "Clinic updated successfully!" if mode == WizardMode.EDIT else "Clinic created successfully!"
    return WizardSubmitResponse(message=message, clinic=record)
