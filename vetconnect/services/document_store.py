"""Remote document store clients."""
import copy
import logging
import uuid
from typing import Dict, Iterable, Optional

from google.cloud import firestore

from vetconnect.core.config import settings

logger = logging.getLogger(__name__)


class DocumentStore:
    """Minimal document database contract used by the clinic mirror."""

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def put(
        self,
        collection: str,
        doc_id: str,
        fields: dict,
        merge: bool = False,
        delete_fields: Iterable[str] = (),
    ) -> None:
        """Write `fields`; with `merge`, keys in `delete_fields` are removed from the stored document."""
        raise NotImplementedError

    def add(self, collection: str, fields: dict) -> str:
        """Create a document and return its id.

        A client-generated `id` in `fields` is used as the document id so
        local and remote copies share one key.
        """
        raise NotImplementedError


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, client: Optional[firestore.Client] = None, project: Optional[str] = None):
        self._client = client
        self._project = project

    @property
    def client(self) -> firestore.Client:
        if self._client is None:
            self._client = firestore.Client(project=self._project)
        return self._client

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        snapshot = self.client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return {"id": snapshot.id, **snapshot.to_dict()}

    def put(self, collection, doc_id, fields, merge=False, delete_fields=()):
        payload = dict(fields)
        if merge:
            payload.update({name: firestore.DELETE_FIELD for name in delete_fields})
        self.client.collection(collection).document(doc_id).set(payload, merge=merge)

    def add(self, collection: str, fields: dict) -> str:
        doc_id = fields.get("id")
        if doc_id:
            self.client.collection(collection).document(doc_id).set(fields)
            return doc_id
        _, ref = self.client.collection(collection).add(fields)
        return ref.id


class InMemoryDocumentStore(DocumentStore):
    """Process-local stand-in used for development and tests."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {}

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        doc = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def put(self, collection, doc_id, fields, merge=False, delete_fields=()):
        docs = self.collections.setdefault(collection, {})
        if merge and doc_id in docs:
            merged = {**docs[doc_id], **copy.deepcopy(fields)}
            for name in delete_fields:
                merged.pop(name, None)
            docs[doc_id] = merged
        else:
            docs[doc_id] = copy.deepcopy(fields)

    def add(self, collection: str, fields: dict) -> str:
        doc_id = fields.get("id") or uuid.uuid4().hex
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(fields)
        return doc_id


_document_store: Optional[DocumentStore] = None


def get_document_store() -> DocumentStore:
    """Return the process-wide document store for the configured backend."""
    global _document_store
    if _document_store is None:
        if settings.DOCUMENT_STORE_BACKEND == "firestore":
            _document_store = FirestoreDocumentStore(project=settings.FIRESTORE_PROJECT_ID)
        else:
            _document_store = InMemoryDocumentStore()
        logger.info(f"Using {type(_document_store).__name__} for remote clinic records")
    return _document_store
