"""
SQLAlchemy ORM models.

Tables
------
* ``batches`` -- one row per herb batch (status is denormalised)
* ``events``  -- append-only event log; kind-specific fields live in the
  JSON ``payload`` column, ledger hashes in ``prev_hash`` / ``hash``

Timestamps are stored as ISO-8601 strings so the offset survives SQLite
round trips unchanged (the ledger hashes the ISO form).
"""

from sqlalchemy import (
    JSON,
    Column,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from .database import Base


class BatchModel(Base):
    __tablename__ = "batches"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, nullable=False)
    species = Column(String(255), nullable=False)
    harvest_date = Column(Date, nullable=False)
    total_quantity = Column(Float, nullable=False)
    unit = Column(String(16), nullable=False, default="kg")
    status = Column(String(20), nullable=False, default="harvested")
    qr_code = Column(String(512), nullable=False, default="")

    events = relationship(
        "EventModel",
        back_populates="batch",
        order_by="EventModel.seq",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (Index("idx_batches_status", "status"),)


class EventModel(Base):
    __tablename__ = "events"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, nullable=False)
    batch_id = Column(String(64), ForeignKey("batches.id"), nullable=False)
    kind = Column(String(20), nullable=False)
    timestamp = Column(String(40), nullable=False)
    payload = Column(JSON, nullable=False)
    prev_hash = Column(String(128), nullable=False)
    hash = Column(String(128), nullable=False)

    batch = relationship("BatchModel", back_populates="events")

    __table_args__ = (
        Index("idx_events_batch", "batch_id"),
        Index("idx_events_kind", "kind"),
    )
