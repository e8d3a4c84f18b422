"""Identity dependencies for tenant-scoped routes."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from folio.services.auth import IdentityStrategy

# Credentials are optional at the HTTP layer; the strategy decides whether they are required
security = HTTPBearer(auto_error=False)


def get_identity_strategy(request: Request) -> IdentityStrategy:
    """Strategy selected at startup (see folio.main)."""
    return request.app.state.identity_strategy


def resolve_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    strategy: IdentityStrategy = Depends(get_identity_strategy),
) -> int:
    """
    Resolve which user the request acts as.

    Never trusts a user id supplied in the request body or path.

    Raises:
        AuthenticationError: Production request without valid credentials
        IdentityConfigurationError: Production deployment without a credential source
    """
    token = credentials.credentials if credentials else None
    return strategy.resolve(token)
