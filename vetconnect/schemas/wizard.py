"""Clinic registration wizard schemas."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from vetconnect.core.constants import WizardMode
from vetconnect.schemas.clinic import CamelModel, ClinicDraft, PersistedClinic


class WizardOpenRequest(CamelModel):
    clinic_id: Optional[str] = None


class WizardJumpRequest(BaseModel):
    step: int = Field(..., ge=1, le=4)


class ServiceToggleRequest(BaseModel):
    service: str


class ServiceSearchRequest(BaseModel):
    query: str = ""


class WizardState(CamelModel):
    mode: WizardMode
    existing_id: Optional[str] = None
    step: int
    step_title: str
    total_steps: int
    draft: ClinicDraft
    errors: Dict[str, str]
    selected_services: List[str]
    service_search: str
    filtered_services: List[str]
    services_dialog_open: bool
    map_open: bool
    is_submitting: bool
    is_open: bool
    can_submit: bool


class WizardSubmitResponse(BaseModel):
    message: str
    clinic: PersistedClinic
