"""
Database table definitions and it stores:
- Plans
- Participants

Main purpose:
Define the persistent Plan + Participant aggregate. Membership, names and
secrets are written once at creation; only Participant.wants_to_bail and
Plan.status ever change afterwards, and only in one direction.
"""


from sqlalchemy import String, Text, Integer, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from bailout.core.clock import utcnow
from bailout.db.base import Base

PLAN_ACTIVE = "active"
PLAN_CANCELLED = "cancelled"


class Plan(Base):
    __tablename__ = "plans"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, default=PLAN_ACTIVE)  # active|cancelled
    num_required: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    participants = relationship(
        "Participant",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="Participant.idx",
    )

class Participant(Base):
    __tablename__ = "participants"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    plan_id: Mapped[str] = mapped_column(String, ForeignKey("plans.id"), index=True)
    idx: Mapped[int] = mapped_column(Integer)
    secret: Mapped[str] = mapped_column(String, unique=True, index=True)
    name: Mapped[str] = mapped_column(String)
    wants_to_bail: Mapped[bool] = mapped_column(Boolean, default=False)

    plan = relationship("Plan", back_populates="participants")
Index("ix_participants_plan_idx", Participant.plan_id, Participant.idx, unique=True)
