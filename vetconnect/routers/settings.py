"""User preference endpoints."""
from fastapi import APIRouter, Depends

from vetconnect.dependencies.services import get_settings_repository
from vetconnect.schemas.settings import PreferencesRead, PreferencesUpdate
from vetconnect.services.settings_repository import SettingsRepository

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=PreferencesRead)
def get_preferences(repo: SettingsRepository = Depends(get_settings_repository)):
    return PreferencesRead(**repo.all())


@router.put("", response_model=PreferencesRead)
def update_preferences(
    payload: PreferencesUpdate,
    repo: SettingsRepository = Depends(get_settings_repository),
):
    for key, value in payload.model_dump(by_alias=True, exclude_none=True).items():
        repo.set(key, value)
    return PreferencesRead(**repo.all())
