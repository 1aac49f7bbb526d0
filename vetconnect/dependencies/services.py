"""Per-request wiring of stores and services."""
from fastapi import Depends
from sqlalchemy.orm import Session

from vetconnect.core.database import get_db
from vetconnect.dependencies.auth import get_current_clinic_owner, get_current_user
from vetconnect.services.clinic_writer import ClinicWriter
from vetconnect.services.geocoding_service import GeocodingService, get_geocoding_service
from vetconnect.services.local_store import LocalClinicStore
from vetconnect.services.mirror_outbox import MirrorOutbox, get_outbox
from vetconnect.services.settings_repository import SettingsRepository
from vetconnect.services.wizard_service import WizardRegistry, wizard_registry


def get_local_clinic_store(
    current_user=Depends(get_current_clinic_owner),
    db: Session = Depends(get_db),
) -> LocalClinicStore:
    return LocalClinicStore(db, current_user["sub"])


def get_mirror_outbox() -> MirrorOutbox:
    return get_outbox()


def get_clinic_writer(
    local: LocalClinicStore = Depends(get_local_clinic_store),
    outbox: MirrorOutbox = Depends(get_mirror_outbox),
) -> ClinicWriter:
    return ClinicWriter(local, outbox)


def get_settings_repository(
    current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SettingsRepository:
    return SettingsRepository(db, current_user["sub"])


def get_geocoder() -> GeocodingService:
    return get_geocoding_service()


def get_wizard_registry() -> WizardRegistry:
    return wizard_registry
