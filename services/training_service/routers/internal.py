from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import TenantContext
from libs.common.results import raise_for_failure
from libs.db.session import get_async_db
from services.training_service.schemas import ReminderCandidateResponse
from services.training_service.services.reminders import list_reminder_candidates
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["internal"])


# --- Internal Service-to-Service Endpoints ---


@router.get(
    "/internal/reminder-candidates",
    response_model=List[ReminderCandidateResponse],
)
async def reminder_candidates(
    max_reminders: Optional[int] = Query(None, ge=0),
    context: TenantContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Read by the reminder dispatcher; sending and recording happen there."""
    result = await list_reminder_candidates(
        db, tenant_id=context.tenant_id, max_reminders=max_reminders
    )
    return raise_for_failure(result)
