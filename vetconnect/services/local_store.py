"""Local durable key-value store and the clinic records kept in it."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vetconnect.core.constants import ACTIVE_CLINIC_KEY, CLINICS_KEY
from vetconnect.models.kv_entry import LocalKVEntry
from vetconnect.utils.errors import ClinicNotFoundError, LocalPersistenceError
from vetconnect.utils.helpers import generate_clinic_id, utc_now_iso

logger = logging.getLogger(__name__)


class KeyValueStore:
    """JSON values under string keys, isolated per namespace."""

    def __init__(self, db: Session, namespace: str):
        self.db = db
        self.namespace = str(namespace)

    def _entry(self, key: str) -> Optional[LocalKVEntry]:
        return self.db.get(LocalKVEntry, (self.namespace, key))

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entry(key)
        if entry is None:
            return default
        try:
            return json.loads(entry.value)
        except ValueError:
            logger.error(f"Corrupt value under {self.namespace}/{key}; ignoring it")
            return default

    def write(self, values: dict, remove: Iterable[str] = ()) -> None:
        """Set and delete several keys in one transaction.

        Either every change lands or none does.
        """
        keys = ", ".join([*values, *remove])
        try:
            now = datetime.now(timezone.utc).replace(tzinfo=None)
            for key, value in values.items():
                payload = json.dumps(value, default=str)
                entry = self._entry(key)
                if entry is None:
                    self.db.add(LocalKVEntry(namespace=self.namespace, key=key, value=payload))
                else:
                    entry.value = payload
                    entry.updated_at = now
            for key in remove:
                entry = self._entry(key)
                if entry is not None:
                    self.db.delete(entry)
            self.db.commit()
        except (SQLAlchemyError, TypeError, ValueError) as e:
            self.db.rollback()
            logger.error(f"Local store write failed for {self.namespace} ({keys}): {e}")
            raise LocalPersistenceError() from e

    def set(self, key: str, value: Any) -> None:
        self.write({key: value})

    def delete(self, key: str) -> None:
        self.write({}, remove=(key,))


class LocalClinicStore:
    """The clinic list kept under a single key, plus the active clinic pointer."""

    def __init__(self, db: Session, namespace: str):
        self.kv = KeyValueStore(db, namespace)

    def get_all(self) -> List[dict]:
        clinics = self.kv.get(CLINICS_KEY, [])
        if not isinstance(clinics, list):
            logger.error(f"Clinic list for {self.kv.namespace} is not a list; ignoring it")
            return []
        return clinics

    def get(self, clinic_id: str) -> Optional[dict]:
        return next((c for c in self.get_all() if c.get("id") == clinic_id), None)

    def save(self, record: dict) -> dict:
        clinics = self.get_all()
        new_clinic = {
            **record,
            "id": record.get("id") or generate_clinic_id(),
            "createdAt": record.get("createdAt") or utc_now_iso(),
        }
        clinics.append(new_clinic)

        values = {CLINICS_KEY: clinics}
        if len(clinics) == 1:
            values[ACTIVE_CLINIC_KEY] = new_clinic["id"]
        self.kv.write(values)

        logger.info(f"Clinic {new_clinic['id']} saved locally for {self.kv.namespace}")
        return new_clinic

    def update(self, clinic_id: str, updates: dict, remove: Iterable[str] = ()) -> dict:
        """Merge `updates` into a stored clinic and drop the `remove` fields."""
        clinics = self.get_all()
        for index, clinic in enumerate(clinics):
            if clinic.get("id") == clinic_id:
                merged = {
                    **clinic,
                    **updates,
                    "id": clinic_id,
                    "updatedAt": updates.get("updatedAt") or utc_now_iso(),
                }
                for field in remove:
                    merged.pop(field, None)
                clinics[index] = merged
                self.kv.set(CLINICS_KEY, clinics)
                logger.info(f"Clinic {clinic_id} updated locally for {self.kv.namespace}")
                return merged
        raise ClinicNotFoundError()

    def delete(self, clinic_id: str) -> bool:
        clinics = self.get_all()
        remaining = [c for c in clinics if c.get("id") != clinic_id]
        if len(remaining) == len(clinics):
            return False

        remove = (ACTIVE_CLINIC_KEY,) if self.kv.get(ACTIVE_CLINIC_KEY) == clinic_id else ()
        self.kv.write({CLINICS_KEY: remaining}, remove=remove)

        logger.info(f"Clinic {clinic_id} deleted locally for {self.kv.namespace}")
        return True

    def get_active(self) -> Optional[dict]:
        active_id = self.kv.get(ACTIVE_CLINIC_KEY)
        if not active_id:
            return None
        return self.get(active_id)

    def set_active(self, clinic_id: str) -> None:
        self.kv.set(ACTIVE_CLINIC_KEY, clinic_id)
