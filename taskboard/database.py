from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import Session, SQLModel, create_engine
from contextlib import contextmanager

from .config import DATABASE_URL

# Import all table models to ensure they are registered with SQLModel metadata
from .models import StorageSlot


def create_db_engine(url: str = DATABASE_URL) -> Engine:
    if url.startswith("sqlite"):
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            return create_engine(
                url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Postgres and friends: disable pooling for serverless and enable pre-ping
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


engine = create_db_engine()


def create_tables(bind: Optional[Engine] = None):
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=bind or engine)


class KeyValueStorage:
    """String slots keyed by name, kept in the ``storage`` table.

    Mirrors the browser's localStorage: ``get_item`` returns ``None`` for an
    unknown key, ``set_item`` overwrites the whole value.
    """

    def __init__(self, bind: Optional[Engine] = None):
        self._engine = bind or engine
        self._session_factory = sessionmaker(bind=self._engine, class_=Session, autoflush=False)
        create_tables(self._engine)

    @contextmanager
    def _session(self):
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def get_item(self, key: str) -> Optional[str]:
        with self._session() as session:
            slot = session.get(StorageSlot, key)
            return slot.value if slot is not None else None

    def set_item(self, key: str, value: str) -> None:
        with self._session() as session:
            slot = session.get(StorageSlot, key)
            if slot is None:
                slot = StorageSlot(key=key, value=value)
            else:
                slot.value = value
                slot.updated_at = datetime.now(timezone.utc)
            session.add(slot)
            session.commit()

