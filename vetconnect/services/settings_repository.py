"""User preferences stored in the local key-value store."""
from typing import Any

from sqlalchemy.orm import Session

from vetconnect.core.constants import SETTING_KEY_PREFIX
from vetconnect.services.local_store import KeyValueStore

DEFAULT_PREFERENCES = {
    "email-notifications": True,
    "push-notifications": True,
    "appointment-reminders": True,
    "profile-visibility": "clinics-only",
    "share-location": True,
    "language": "en",
}


class SettingsRepository:
    def __init__(self, db: Session, namespace: str):
        self.kv = KeyValueStore(db, namespace)

    def get(self, key: str, default: Any = None) -> Any:
        return self.kv.get(f"{SETTING_KEY_PREFIX}{key}", default)

    def set(self, key: str, value: Any) -> None:
        self.kv.set(f"{SETTING_KEY_PREFIX}{key}", value)

    def all(self) -> dict:
        return {key: self.get(key, default) for key, default in DEFAULT_PREFERENCES.items()}
