"""Per-step validation for the clinic registration wizard.

Every function here is pure: it reads the draft and the current service
selection and returns a field -> message map. An empty map means the step
passes.
"""
import re
from typing import Dict, Optional, Sequence

from vetconnect.core.constants import WizardStep
from vetconnect.schemas.clinic import ClinicDraft

ErrorMap = Dict[str, str]

CONTACT_NUMBER_PATTERN = re.compile(r"[0-9\s\-+()]{7,20}")

REQUIRED_STEPS = (
    WizardStep.BASIC_INFO,
    WizardStep.LOCATION_CONTACT,
    WizardStep.SERVICES_HOURS,
)


def is_valid_contact_number(value: str) -> bool:
    return bool(CONTACT_NUMBER_PATTERN.fullmatch(value or ""))


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def _basic_info(draft: ClinicDraft, selected_services: Sequence[str]) -> ErrorMap:
    errors: ErrorMap = {}
    if _blank(draft.clinic_name):
        errors["clinicName"] = "Clinic name is required"
    return errors


def _location_contact(draft: ClinicDraft, selected_services: Sequence[str]) -> ErrorMap:
    errors: ErrorMap = {}
    if _blank(draft.address):
        errors["address"] = "Location is required"
    if _blank(draft.contact_number):
        errors["contactNumber"] = "Contact number is required"
    elif not is_valid_contact_number(draft.contact_number):
        errors["contactNumber"] = "Invalid contact number format"
    return errors


def _services_hours(draft: ClinicDraft, selected_services: Sequence[str]) -> ErrorMap:
    errors: ErrorMap = {}
    if _blank(draft.open_hours):
        errors["openHours"] = "Open hours are required"
    if not selected_services:
        errors["services"] = "Please select at least one service"
    return errors


def _additional_details(draft: ClinicDraft, selected_services: Sequence[str]) -> ErrorMap:
    return {}


_RULES = {
    WizardStep.BASIC_INFO: _basic_info,
    WizardStep.LOCATION_CONTACT: _location_contact,
    WizardStep.SERVICES_HOURS: _services_hours,
    WizardStep.ADDITIONAL_DETAILS: _additional_details,
}


def validate_step(step: int, draft: ClinicDraft, selected_services: Sequence[str]) -> ErrorMap:
    try:
        rule = _RULES[WizardStep(step)]
    except ValueError:
        raise ValueError(f"Unknown wizard step: {step}")
    return rule(draft, selected_services)


def validate_required_steps(draft: ClinicDraft, selected_services: Sequence[str]) -> ErrorMap:
    errors: ErrorMap = {}
    for step in REQUIRED_STEPS:
        errors.update(validate_step(step, draft, selected_services))
    return errors


def first_invalid_step(
    draft: ClinicDraft,
    selected_services: Sequence[str],
    steps: Sequence[int] = REQUIRED_STEPS,
) -> Optional[int]:
    for step in steps:
        if validate_step(step, draft, selected_services):
            return int(step)
    return None
