import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.training_service.models.enums import AssignmentStatus, enum_values
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# ASSIGNMENT & COMPLETION MODELS
# ============================================================================


class Assignment(Base):
    """One learning item scheduled to one employee.

    Recurring items produce a new row every cycle, so an employee can hold
    several assignments against the same item.
    """

    __tablename__ = "assignments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("employees.id"), nullable=False, index=True
    )
    learning_item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("learning_items.id"), nullable=False, index=True
    )

    required_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    status: Mapped[AssignmentStatus] = mapped_column(
        SAEnum(
            AssignmentStatus,
            name="assignment_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=AssignmentStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Reminder tracking (maintained by the reminder dispatcher)
    reminders_sent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_reminder_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    video_watch_percent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Location captured when the employee started the item
    started_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    started_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    started_accuracy_meters: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True
    )
    started_location_timestamp: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    employee = relationship("Employee")
    learning_item = relationship("LearningItem")
    completion = relationship(
        "Completion", back_populates="assignment", uselist=False
    )

    def __repr__(self):
        return f"<Assignment Employee={self.employee_id} Item={self.learning_item_id} {self.status}>"


class Completion(Base):
    """Created once, when an assignment transitions to completed."""

    __tablename__ = "completions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    assignment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("assignments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    total_time_spent_seconds: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    video_watch_percent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Quiz
    quiz_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    quiz_max_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    quiz_passed: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Signature
    signed_by_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    signed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    signature_data: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    certificate_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # Location captured at completion
    completed_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    completed_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    completed_accuracy_meters: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True
    )
    completed_location_timestamp: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    # Relationships
    assignment = relationship("Assignment", back_populates="completion")

    def __repr__(self):
        return f"<Completion Assignment={self.assignment_id}>"
