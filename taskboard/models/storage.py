from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StorageSlot(SQLModel, table=True):
    """Durable key/value slot holding a serialized snapshot.

    One row per key; the value is overwritten wholesale on every write.
    """
    __tablename__ = "storage"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=_utcnow)
