"""Outbox for mirroring local writes to the remote document store.

Every queued operation is attempted once. Failures are logged and parked in
`failed`; nothing is retried and nothing is raised to the caller.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from vetconnect.services.document_store import DocumentStore, get_document_store
from vetconnect.utils.errors import RemotePersistenceError

logger = logging.getLogger(__name__)


@dataclass
class MirrorOperation:
    kind: str  # "add" | "put"
    collection: str
    doc_id: str
    fields: dict
    merge: bool = False
    delete_fields: Tuple[str, ...] = ()
    error: Optional[str] = field(default=None, compare=False)


class MirrorOutbox:
    def __init__(self, store: DocumentStore):
        self.store = store
        self.pending: List[MirrorOperation] = []
        self.failed: List[MirrorOperation] = []
        self.delivered: int = 0
        self._lock = threading.Lock()

    def enqueue(self, operation: MirrorOperation) -> None:
        with self._lock:
            self.pending.append(operation)

    def _apply(self, operation: MirrorOperation) -> None:
        try:
            if operation.kind == "add":
                self.store.add(operation.collection, operation.fields)
            elif operation.kind == "put":
                self.store.put(
                    operation.collection,
                    operation.doc_id,
                    operation.fields,
                    merge=operation.merge,
                    delete_fields=operation.delete_fields,
                )
            else:
                raise ValueError(f"Unknown mirror operation: {operation.kind}")
        except Exception as e:
            raise RemotePersistenceError(str(e)) from e

    def flush(self) -> int:
        """Attempt every pending operation once; return how many succeeded."""
        with self._lock:
            batch, self.pending = self.pending, []

        succeeded = 0
        for operation in batch:
            try:
                self._apply(operation)
            except RemotePersistenceError as e:
                operation.error = e.detail
                with self._lock:
                    self.failed.append(operation)
                logger.warning(
                    f"Remote mirror of {operation.collection}/{operation.doc_id} failed: {e.detail}"
                )
                continue
            succeeded += 1
            logger.info(f"Mirrored {operation.collection}/{operation.doc_id} ({operation.kind})")

        with self._lock:
            self.delivered += succeeded
        return succeeded


_outbox: Optional[MirrorOutbox] = None


def get_outbox() -> MirrorOutbox:
    global _outbox
    if _outbox is None:
        _outbox = MirrorOutbox(get_document_store())
    return _outbox
