"""Training Service schemas package.

IMPORTANT: Every schema class must be listed here.
When adding a new schema, add its import and __all__ entry.
"""

from services.training_service.schemas.reports import (  # noqa: F401
    ComplianceCounts,
    ComplianceReportResponse,
    CompletionDetailResponse,
    CompletionReportResponse,
    LearningComplianceResponse,
    OverdueItemResponse,
    ReminderCandidateResponse,
    SiteComplianceResponse,
    SkillsMatrixCell,
    SkillsMatrixEmployee,
    SkillsMatrixLearning,
    SkillsMatrixResponse,
)

__all__ = [
    # Compliance
    "ComplianceCounts",
    "ComplianceReportResponse",
    "LearningComplianceResponse",
    "SiteComplianceResponse",
    # Overdue / completions
    "CompletionDetailResponse",
    "CompletionReportResponse",
    "OverdueItemResponse",
    # Skills matrix
    "SkillsMatrixCell",
    "SkillsMatrixEmployee",
    "SkillsMatrixLearning",
    "SkillsMatrixResponse",
    # Reminders
    "ReminderCandidateResponse",
]
