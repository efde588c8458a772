import logging

from app.config import settings
from app.core.exceptions import IncompleteContextException
from app.models.scope import Scope
from app.models.tenant_context import TenantContext

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ScopeResolver:
    """
    Maps a request's tenant context onto a storage partition.

    Pure: never touches storage.
    """

    def __init__(self, home_tenant_name: str | None = None, strict: bool | None = None):
        self.home_tenant_name = home_tenant_name or settings.HOME_TENANT_NAME
        self.strict = settings.STRICT_SCOPE_RESOLUTION if strict is None else strict

    def resolve(self, context: TenantContext) -> Scope:
        """
        Resolve a tenant context to Home or a specific account partition.

        Rules:
        - no account id and no account name -> Home
        - account name equal (case-insensitively) to the home tenant -> Home
        - only one of account id / account name -> Home, or
          IncompleteContextException when strict
        - otherwise -> Account(id, name, enterprise id, enterprise name)

        Raises:
            IncompleteContextException: Strict mode and half-specified context
        """
        account_id = _clean(context.account_id)
        account_name = _clean(context.account_name)

        if account_id is None and account_name is None:
            return Scope.home()

        if account_name is not None and account_name.lower() == self.home_tenant_name.lower():
            return Scope.home()

        if account_id is None or account_name is None:
            missing, given = (
                ("account_name", "account_id") if account_name is None else ("account_id", "account_name")
            )
            if self.strict:
                raise IncompleteContextException(
                    f"Tenant context is incomplete: {missing} is required when {given} is given"
                )
            logger.warning("Incomplete tenant context (%s missing), falling back to Home: %r", missing, context)
            return Scope.home()

        return Scope.account(
            account_id=account_id,
            account_name=account_name,
            enterprise_id=_clean(context.enterprise_id),
            enterprise_name=_clean(context.enterprise_name),
        )
