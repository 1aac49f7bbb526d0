"""Clinic registration wizard.

Four steps: basic info, location and contact, services and hours, additional
details. Moving forward requires the current step to validate; moving back
never does. The map picker and the services dialog are side trips that leave
the step where it is.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic.alias_generators import to_camel

from vetconnect.core.config import settings
from vetconnect.core.constants import (
    AVAILABLE_SERVICES,
    FIRST_STEP,
    LAST_STEP,
    STEP_TITLES,
    WizardMode,
    WizardStep,
)
from vetconnect.schemas.clinic import ClinicDraft, Veterinarian
from vetconnect.schemas.wizard import WizardState
from vetconnect.services.clinic_writer import ClinicWriter
from vetconnect.services.service_catalog import ServiceCatalogSelector, parse_services
from vetconnect.services.step_validator import (
    first_invalid_step,
    validate_required_steps,
    validate_step,
)
from vetconnect.utils.coordinates import extract, normalize, try_normalize
from vetconnect.utils.errors import (
    StepValidationError,
    SubmissionInProgressError,
    UploadRejectedError,
    WizardNotOpenError,
    WizardStepError,
)
from vetconnect.utils.helpers import generate_short_id

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("clinic_name", "address", "contact_number", "open_hours", "description")


def draft_from_record(record: Dict[str, Any]) -> ClinicDraft:
    """Hydrate a draft from a stored clinic, whatever coordinate shape it uses."""
    coordinates = try_normalize(record) if extract(record) is not None else None
    veterinarians = [
        {**vet, "id": str(vet.get("id") or generate_short_id())}
        for vet in record.get("veterinarians") or []
        if isinstance(vet, dict)
    ]
    return ClinicDraft(
        clinic_name=record.get("clinicName") or "",
        address=record.get("address") or "",
        coordinates=coordinates,
        contact_number=record.get("contactNumber") or "",
        open_hours=record.get("openHours") or "",
        services=record.get("services") or "",
        description=record.get("description") or "",
        veterinarians=veterinarians,
        profile_picture=record.get("profilePicture") or "",
        gallery_photos=list(record.get("galleryPhotos") or []),
    )


class ClinicWizard:
    def __init__(self, catalog: Sequence[str] = AVAILABLE_SERVICES):
        self.selector = ServiceCatalogSelector(catalog)
        self.mode = WizardMode.CREATE
        self.existing_id: Optional[str] = None
        self.is_open = False
        self._reset()

    def _reset(self) -> None:
        self.step = FIRST_STEP
        self.draft = ClinicDraft()
        self.errors: Dict[str, str] = {}
        self.selector.reset()
        self.map_open = False
        self.is_submitting = False

    def _require_open(self) -> None:
        if not self.is_open:
            raise WizardNotOpenError()

    @property
    def selected_services(self) -> List[str]:
        return self.selector.selected

    # ---------------- Lifecycle ----------------

    def open(self, existing: Optional[Dict[str, Any]] = None) -> None:
        self._reset()
        if existing:
            self.mode = WizardMode.EDIT
            self.existing_id = existing.get("id")
            self.draft = draft_from_record(existing)
            self.selector.reset(parse_services(self.draft.services))
        else:
            self.mode = WizardMode.CREATE
            self.existing_id = None
        self.is_open = True

    def close(self) -> None:
        self._reset()
        self.mode = WizardMode.CREATE
        self.existing_id = None
        self.is_open = False

    def cancel(self) -> None:
        self._require_open()
        self.close()

    # ---------------- Draft edits ----------------

    def update(self, **changes: Any) -> None:
        self._require_open()
        for name, value in changes.items():
            if name not in EDITABLE_FIELDS:
                raise ValueError(f"Field {name} cannot be edited directly")
            setattr(self.draft, name, value if value is not None else "")
            self.errors.pop(to_camel(name), None)

    # ---------------- Navigation ----------------

    def next(self) -> bool:
        self._require_open()
        self.errors = validate_step(self.step, self.draft, self.selected_services)
        if self.errors:
            return False
        self.step = WizardStep(min(self.step + 1, LAST_STEP))
        return True

    def previous(self) -> None:
        self._require_open()
        self.errors = {}
        self.step = WizardStep(max(self.step - 1, FIRST_STEP))

    def jump(self, target: int) -> bool:
        """Go straight to `target`.

        Going forward validates every step on the way; the wizard stops on the
        first one that fails and shows its errors.
        """
        self._require_open()
        try:
            target = WizardStep(target)
        except ValueError:
            raise WizardStepError(f"No such step: {target}")

        if target <= self.step:
            self.errors = {}
            self.step = target
            return True

        for step in range(self.step, target):
            errors = validate_step(step, self.draft, self.selected_services)
            if errors:
                self.step = WizardStep(step)
                self.errors = errors
                return False
        self.errors = {}
        self.step = target
        return True

    # ---------------- Map picker ----------------

    def open_map(self) -> None:
        self._require_open()
        self.map_open = True

    def close_map(self) -> None:
        self._require_open()
        self.map_open = False

    def select_location(self, address: str, coordinates: Any) -> None:
        """Apply a map pick; raises InvalidCoordinatesError for unusable input."""
        self._require_open()
        coords = normalize(coordinates)
        self.draft.address = address
        self.draft.coordinates = coords
        self.errors.pop("address", None)
        self.map_open = False

    # ---------------- Services dialog ----------------

    def open_services(self) -> None:
        self._require_open()
        self.selector.open()

    def search_services(self, query: str) -> List[str]:
        self._require_open()
        return self.selector.set_search(query)

    def toggle_service(self, service: str) -> List[str]:
        self._require_open()
        return self.selector.toggle(service)

    def select_all_services(self) -> List[str]:
        self._require_open()
        return self.selector.select_all()

    def deselect_all_services(self) -> List[str]:
        self._require_open()
        return self.selector.deselect_all()

    def confirm_services(self) -> str:
        self._require_open()
        services = self.selector.confirm(self.draft)
        self.errors.pop("services", None)
        return services

    def cancel_services(self) -> None:
        self._require_open()
        self.selector.cancel()

    def remove_service(self, service: str) -> str:
        self._require_open()
        return self.selector.remove(service, self.draft)

    # ---------------- Veterinarians and photos ----------------

    def add_veterinarian(self, name: str, specialization: str, phone: str = "", email: str = "") -> Veterinarian:
        self._require_open()
        if not (name or "").strip() or not (specialization or "").strip():
            raise StepValidationError(
                {"veterinarian": "Please fill in veterinarian name and specialization"},
                step=int(self.step),
            )
        vet = Veterinarian(
            id=generate_short_id(),
            name=name.strip(),
            specialization=specialization.strip(),
            phone=phone or "",
            email=email or "",
        )
        self.draft.veterinarians.append(vet)
        return vet

    def remove_veterinarian(self, vet_id: str) -> bool:
        self._require_open()
        before = len(self.draft.veterinarians)
        self.draft.veterinarians = [v for v in self.draft.veterinarians if v.id != vet_id]
        return len(self.draft.veterinarians) < before

    def set_profile_picture(self, url: str) -> None:
        self._require_open()
        self.draft.profile_picture = url or ""

    def ensure_gallery_capacity(self) -> None:
        self._require_open()
        if len(self.draft.gallery_photos) >= settings.MAX_GALLERY_PHOTOS:
            raise UploadRejectedError(f"Maximum {settings.MAX_GALLERY_PHOTOS} gallery photos allowed")

    def add_gallery_photo(self, url: str) -> List[str]:
        self.ensure_gallery_capacity()
        self.draft.gallery_photos.append(url)
        return self.draft.gallery_photos

    def remove_gallery_photo(self, index: int) -> List[str]:
        self._require_open()
        if not 0 <= index < len(self.draft.gallery_photos):
            raise UploadRejectedError("No gallery photo at that position")
        del self.draft.gallery_photos[index]
        return self.draft.gallery_photos

    # ---------------- Submit ----------------

    async def submit(self, writer: ClinicWriter, owner: dict, defer_mirror: bool = False) -> dict:
        """Persist the draft and close the wizard.

        Steps 1-3 are validated again even though navigation already did. If
        anything fails the wizard stays open with the draft untouched.
        """
        self._require_open()
        if self.is_submitting:
            raise SubmissionInProgressError()
        if self.step != LAST_STEP:
            raise WizardStepError("The clinic can only be saved from the last step")

        errors = validate_required_steps(self.draft, self.selected_services)
        if errors:
            self.errors = errors
            raise StepValidationError(errors, step=first_invalid_step(self.draft, self.selected_services))

        self.is_submitting = True
        try:
            record = await writer.commit(
                self.draft,
                self.mode,
                owner,
                existing_id=self.existing_id,
                defer_mirror=defer_mirror,
            )
        except Exception:
            logger.exception("Clinic submit failed; keeping the draft")
            raise
        finally:
            self.is_submitting = False

        self.close()
        return record

    # ---------------- State ----------------

    def snapshot(self) -> WizardState:
        return WizardState(
            mode=self.mode,
            existing_id=self.existing_id,
            step=int(self.step),
            step_title=STEP_TITLES[self.step],
            total_steps=int(LAST_STEP),
            draft=self.draft.model_copy(deep=True),
            errors=dict(self.errors),
            selected_services=list(self.selected_services),
            service_search=self.selector.search,
            filtered_services=self.selector.filter(),
            services_dialog_open=self.selector.is_open,
            map_open=self.map_open,
            is_submitting=self.is_submitting,
            is_open=self.is_open,
            can_submit=self.is_open and self.step == LAST_STEP and not self.is_submitting,
        )


class WizardRegistry:
    """Open wizards keyed by owner id; an owner has at most one."""

    def __init__(self):
        self._wizards: Dict[str, ClinicWizard] = {}

    def open(self, owner_id: str, existing: Optional[Dict[str, Any]] = None) -> ClinicWizard:
        wizard = ClinicWizard()
        wizard.open(existing)
        self._wizards[str(owner_id)] = wizard
        return wizard

    def get(self, owner_id: str) -> ClinicWizard:
        wizard = self._wizards.get(str(owner_id))
        if wizard is None or not wizard.is_open:
            raise WizardNotOpenError()
        return wizard

    def discard(self, owner_id: str) -> None:
        self._wizards.pop(str(owner_id), None)


wizard_registry = WizardRegistry()
