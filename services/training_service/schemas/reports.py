"""Report schemas handed to callers and export renderers."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field
from services.training_service.models.enums import CellStatus

# ---------------------------------------------------------------------------
# Compliance
# ---------------------------------------------------------------------------


class ComplianceCounts(BaseModel):
    assigned_count: int = 0
    completed_count: int = 0
    overdue_count: int = 0
    pending_count: int = 0
    in_progress_count: int = 0
    compliance_percentage: Decimal = Decimal("0.00")


class SiteComplianceResponse(ComplianceCounts):
    site_id: uuid.UUID
    site_name: str
    total_employees: int


class LearningComplianceResponse(ComplianceCounts):
    learning_item_id: uuid.UUID
    code: str
    title: str
    # Only over completions whose quiz was scored; None when there are none
    average_quiz_score: Optional[Decimal] = None
    quiz_pass_rate: Optional[Decimal] = None


class ComplianceReportResponse(ComplianceCounts):
    total_employees: int
    by_site: list[SiteComplianceResponse] = Field(default_factory=list)
    by_learning_item: list[LearningComplianceResponse] = Field(default_factory=list)
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    generated_at: datetime


# ---------------------------------------------------------------------------
# Overdue / completions
# ---------------------------------------------------------------------------


class OverdueItemResponse(BaseModel):
    assignment_id: uuid.UUID
    employee_id: uuid.UUID
    employee_name: str
    email: Optional[str] = None
    site_name: Optional[str] = None
    learning_item_id: uuid.UUID
    learning_code: str
    learning_title: str
    due_date: datetime
    days_overdue: int
    reminders_sent: int
    last_reminder_at: Optional[datetime] = None
    is_in_progress: bool
    video_watch_percent: int


class CompletionDetailResponse(BaseModel):
    assignment_id: uuid.UUID
    completion_id: uuid.UUID
    employee_id: uuid.UUID
    employee_name: str
    email: Optional[str] = None
    site_name: Optional[str] = None
    learning_item_id: uuid.UUID
    learning_code: str
    learning_title: str
    required_date: datetime
    due_date: datetime
    completed_at: datetime
    completed_on_time: bool
    time_spent_minutes: int
    video_watch_percent: int
    quiz_score: Optional[int] = None
    quiz_max_score: Optional[int] = None
    quiz_passed: Optional[bool] = None
    quiz_score_percentage: Optional[Decimal] = None
    signed_by_name: Optional[str] = None
    signed_at: Optional[datetime] = None
    certificate_url: Optional[str] = None
    started_latitude: Optional[float] = None
    started_longitude: Optional[float] = None
    started_accuracy_meters: Optional[float] = None
    started_location_timestamp: Optional[datetime] = None
    completed_latitude: Optional[float] = None
    completed_longitude: Optional[float] = None
    completed_accuracy_meters: Optional[float] = None
    completed_location_timestamp: Optional[datetime] = None


class CompletionReportResponse(BaseModel):
    items: list[CompletionDetailResponse]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_previous: bool
    has_next: bool


# ---------------------------------------------------------------------------
# Skills matrix
# ---------------------------------------------------------------------------


class SkillsMatrixEmployee(BaseModel):
    id: uuid.UUID
    employee_code: str
    full_name: str
    department: Optional[str] = None
    job_title: Optional[str] = None


class SkillsMatrixLearning(BaseModel):
    id: uuid.UUID
    code: str
    title: str
    category: Optional[str] = None
    category_name: Optional[str] = None


class SkillsMatrixCell(BaseModel):
    employee_id: uuid.UUID
    learning_item_id: uuid.UUID
    status: CellStatus = CellStatus.NOT_ASSIGNED
    score: Optional[int] = None
    completed_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    days_overdue: Optional[int] = None


class SkillsMatrixResponse(BaseModel):
    employees: list[SkillsMatrixEmployee]
    learning_items: list[SkillsMatrixLearning]
    cells: list[SkillsMatrixCell]


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------


class ReminderCandidateResponse(BaseModel):
    assignment_id: uuid.UUID
    employee_id: uuid.UUID
    employee_name: str
    email: Optional[str] = None
    learning_item_id: uuid.UUID
    learning_title: str
    due_date: datetime
    days_overdue: int
    reminders_sent: int
    last_reminder_at: Optional[datetime] = None
