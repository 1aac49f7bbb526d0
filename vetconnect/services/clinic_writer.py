"""Dual-write persistence for clinic registrations.

The local store is written first and is the source of truth for the response.
The remote document store gets a best-effort mirror through the outbox; a
failed mirror never fails the commit.
"""
import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from vetconnect.core.config import settings
from vetconnect.core.constants import WizardMode
from vetconnect.schemas.clinic import ClinicDraft
from vetconnect.services.local_store import LocalClinicStore
from vetconnect.services.mirror_outbox import MirrorOperation, MirrorOutbox
from vetconnect.utils.coordinates import COORDINATE_FIELDS, fan_out, try_normalize
from vetconnect.utils.errors import ClinicAccessDenied, ClinicNotFoundError
from vetconnect.utils.helpers import generate_clinic_id, utc_now_iso

logger = logging.getLogger(__name__)


def owner_identity(owner: dict) -> tuple[str, Optional[str]]:
    """(owner id, display name) from an identity token payload."""
    return str(owner["sub"]), owner.get("name") or owner.get("email")


def check_owner(record: dict, owner_id: str) -> None:
    """Records without an owner predate ownership and are open to anyone."""
    if record.get("ownerId") and str(record["ownerId"]) != str(owner_id):
        raise ClinicAccessDenied()


def without_coordinates(record: dict) -> dict:
    return {k: v for k, v in record.items() if k not in COORDINATE_FIELDS}


def draft_to_fields(draft: ClinicDraft) -> dict:
    """Stored representation of a draft, coordinates fanned out when valid."""
    fields = draft.model_dump(by_alias=True, exclude={"coordinates"})
    coords = try_normalize(draft.coordinates)
    if coords is not None:
        fields.update(fan_out(coords))
    return fields


class ClinicWriter:
    def __init__(self, local: LocalClinicStore, outbox: MirrorOutbox, collection: Optional[str] = None):
        self.local = local
        self.outbox = outbox
        self.collection = collection or settings.CLINICS_COLLECTION

    async def commit(
        self,
        draft: ClinicDraft,
        mode: WizardMode,
        owner: dict,
        existing_id: Optional[str] = None,
        defer_mirror: bool = False,
    ) -> dict:
        owner_id, owner_name = owner_identity(owner)
        fields = draft_to_fields(draft)

        if mode == WizardMode.EDIT:
            if not existing_id:
                raise ClinicNotFoundError("No clinic selected for editing")
            record, operation = self._update(existing_id, fields, owner_id)
        else:
            record, operation = self._create(fields, owner_id, owner_name)

        self.outbox.enqueue(operation)
        if not defer_mirror:
            await run_in_threadpool(self.outbox.flush)
        return record

    def find(self, clinic_id: str) -> Optional[dict]:
        """Local record first, then the remote copy."""
        return self.local.get(clinic_id) or self._remote_get(clinic_id)

    def _remote_get(self, clinic_id: str) -> Optional[dict]:
        try:
            return self.outbox.store.get(self.collection, clinic_id)
        except Exception as e:
            logger.warning(f"Could not read {self.collection}/{clinic_id} from remote store: {e}")
            return None

    def _create(self, fields: dict, owner_id: str, owner_name: Optional[str]):
        now = utc_now_iso()
        record = self.local.save({
            **fields,
            "id": generate_clinic_id(),
            "ownerId": owner_id,
            "ownerName": owner_name,
            "rating": 0,
            "reviewCount": 0,
            "verified": False,
            "createdAt": now,
            "updatedAt": now,
        })
        operation = MirrorOperation(kind="add", collection=self.collection, doc_id=record["id"], fields=record)
        return record, operation

    def _update(self, clinic_id: str, fields: dict, owner_id: str):
        existing = self.local.get(clinic_id) or self._adopt_remote(clinic_id, owner_id)
        if existing is None:
            raise ClinicNotFoundError()
        check_owner(existing, owner_id)

        updates = {**fields, "updatedAt": utc_now_iso()}
        # no usable coordinates: older encodings must not survive the merge
        stale = () if "latitude" in fields else COORDINATE_FIELDS
        record = self.local.update(clinic_id, updates, remove=stale)
        operation = MirrorOperation(
            kind="put",
            collection=self.collection,
            doc_id=clinic_id,
            fields={**updates, "id": clinic_id},
            merge=True,
            delete_fields=tuple(stale),
        )
        return record, operation

    def _adopt_remote(self, clinic_id: str, owner_id: str) -> Optional[dict]:
        """Copy a clinic that only exists remotely into the local store."""
        remote = self._remote_get(clinic_id)
        if remote is None:
            return None
        check_owner(remote, owner_id)
        record = {**remote, "id": clinic_id}
        if try_normalize(record) is None:
            record = without_coordinates(record)
        return self.local.save(record)
