import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy import UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

# Category names used across services
TRAINING_CATEGORY = "TrainingCategory"
DEPARTMENT = "Department"
JOB_TITLE = "JobTitle"
LANGUAGE = "Language"


class LookupCategory(Base):
    """A named classification list (e.g. TrainingCategory)."""

    __tablename__ = "lookup_categories"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    module: Mapped[str] = mapped_column(String, nullable=False, default="core")
    allow_custom: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    values: Mapped[list["LookupValue"]] = relationship(back_populates="category")


class LookupValue(Base):
    """Global default value shared by every tenant."""

    __tablename__ = "lookup_values"
    __table_args__ = (
        UniqueConstraint("category_id", "code", name="uq_lookup_values_category_code"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("lookup_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[Optional[dict]] = mapped_column("metadata", JSON, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    category: Mapped[LookupCategory] = relationship(back_populates="values")


class TenantLookupValue(Base):
    """A tenant's row in a category.

    With ``lookup_value_id`` set it overrides (or suppresses, when disabled)
    that global value; without it, it is a tenant custom value.
    """

    __tablename__ = "tenant_lookup_values"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id",
            "category_id",
            "code",
            name="uq_tenant_lookup_values_tenant_category_code",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("lookup_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    lookup_value_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("lookup_values.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    code: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    metadata_: Mapped[Optional[dict]] = mapped_column("metadata", JSON, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    @property
    def is_override(self) -> bool:
        return self.lookup_value_id is not None
