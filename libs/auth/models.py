import uuid
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

ADMIN_ROLES = {"admin", "super_user"}
SUPERVISOR_ROLE = "supervisor"


class AuthUser(BaseModel):
    """
    Claims of the bearer token presented by the caller.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "employee"
    tenant_id: uuid.UUID
    employee_id: Optional[uuid.UUID] = None
    is_super_user: bool = False

    @property
    def is_admin(self) -> bool:
        return self.is_super_user or self.role in ADMIN_ROLES


@dataclass(frozen=True)
class TenantContext:
    """Caller identity threaded explicitly through every operation.

    Built per request from the token; nothing reads a process-wide "current
    tenant".
    """

    tenant_id: uuid.UUID
    user_id: str
    role: str
    employee_id: Optional[uuid.UUID] = None
    is_super_user: bool = False

    @property
    def is_admin(self) -> bool:
        return self.is_super_user or self.role in ADMIN_ROLES

    @property
    def is_supervisor(self) -> bool:
        return self.role == SUPERVISOR_ROLE

    @classmethod
    def from_user(
        cls, user: AuthUser, tenant_id: Optional[uuid.UUID] = None
    ) -> "TenantContext":
        return cls(
            tenant_id=tenant_id or user.tenant_id,
            user_id=user.user_id,
            role=user.role,
            employee_id=user.employee_id,
            is_super_user=user.is_super_user,
        )
