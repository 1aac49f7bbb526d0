"""Local key-value store table."""
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from vetconnect.core.database import Base


class LocalKVEntry(Base):
    """One JSON value under (namespace, key).

    The namespace is the owner identity, so each owner gets an isolated store
    the way each browser had its own storage.
    """

    __tablename__ = "local_kv_entries"

    namespace = Column(String(128), primary_key=True)
    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
