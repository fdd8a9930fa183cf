import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.training_service.models.enums import LearningFrequency, enum_values
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column


class LearningItem(Base):
    """A trainable unit (safety talk or course) owned by a tenant."""

    __tablename__ = "learning_items"
    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_learning_items_tenant_code"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    code: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Code of a TrainingCategory lookup value (global, override or tenant custom)
    category: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)

    frequency: Mapped[LearningFrequency] = mapped_column(
        SAEnum(
            LearningFrequency,
            name="learning_frequency_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=LearningFrequency.ONCE,
        nullable=False,
    )

    # Quiz configuration
    requires_quiz: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    pass_threshold: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    question_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<LearningItem {self.code}>"
