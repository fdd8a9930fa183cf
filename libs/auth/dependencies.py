import uuid
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AuthUser, TenantContext
from libs.common.config import get_settings

settings = get_settings()
security = HTTPBearer()


async def get_current_user(
    token: Annotated[HTTPAuthorizationCredentials, Depends(security)]
) -> AuthUser:
    """
    Validate the bearer token and return the authenticated user.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token.credentials,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
        return AuthUser(**payload)

    except (JWTError, ValidationError):
        raise credentials_exception


async def get_tenant_context(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    tenant_id: Optional[uuid.UUID] = Query(
        None, description="Target tenant (super users only)"
    ),
) -> TenantContext:
    """
    Build the explicit tenant context for this request.

    Only super users may address a tenant other than the one in their token.
    """
    if tenant_id is not None and tenant_id != current_user.tenant_id:
        if not current_user.is_super_user:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Cross-tenant access requires super user privileges",
            )
    return TenantContext.from_user(current_user, tenant_id=tenant_id)


async def require_admin(
    context: Annotated[TenantContext, Depends(get_tenant_context)]
) -> TenantContext:
    """
    Ensure the caller administers the tenant (admin role or super user).
    """
    if not context.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return context
