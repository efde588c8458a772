from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.security import extract_subject
from app.core.exceptions import UnauthorizedException
from app.database import get_db
from app.models.tenant_context import TenantContext
from app.repositories.store_factory import IdentityStores, build_stores

security = HTTPBearer()


async def get_current_operator(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """
    FastAPI dependency to validate the operator's JWT.

    Returns:
        The operator id from the token's 'sub' claim

    Raises:
        HTTPException 401: If token invalid or expired
    """
    try:
        return extract_subject(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_tenant_context(
    account_id: str | None = Query(None, description="Target account id"),
    account_name: str | None = Query(None, description="Target account name"),
    enterprise_id: str | None = Query(None, description="Optional enterprise id"),
    enterprise_name: str | None = Query(None, description="Optional enterprise name"),
) -> TenantContext:
    """Collect the raw tenant context; ScopeResolver interprets it"""
    return TenantContext(
        account_id=account_id,
        account_name=account_name,
        enterprise_id=enterprise_id,
        enterprise_name=enterprise_name,
    )


def get_stores(db: Session = Depends(get_db)) -> IdentityStores:
    """FastAPI dependency returning the configured entity stores"""
    return build_stores(db)
