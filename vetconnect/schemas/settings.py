"""Preference schemas."""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


def _dashed(field_name: str) -> str:
    return field_name.replace("_", "-")


class PreferencesRead(BaseModel):
    email_notifications: bool
    push_notifications: bool
    appointment_reminders: bool
    profile_visibility: Literal["public", "clinics-only", "private"]
    share_location: bool
    language: str

    model_config = ConfigDict(alias_generator=_dashed, populate_by_name=True)


class PreferencesUpdate(BaseModel):
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    appointment_reminders: Optional[bool] = None
    profile_visibility: Optional[Literal["public", "clinics-only", "private"]] = None
    share_location: Optional[bool] = None
    language: Optional[str] = None

    model_config = ConfigDict(alias_generator=_dashed, populate_by_name=True)
