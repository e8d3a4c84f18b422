"""Identity resolution strategies.

One strategy is selected at startup from the deployment mode. Development
builds resolve a configured (or default) user id; production builds only
accept a verified bearer token and never fall back to a default user.
"""

import logging
from abc import ABC, abstractmethod

import jwt

from folio.config import Settings

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Credentials missing, invalid or expired."""


class IdentityConfigurationError(Exception):
    """No credential source is configured for this deployment."""


class IdentityStrategy(ABC):
    """Resolves the user id a request acts as."""

    @abstractmethod
    def resolve(self, token: str | None) -> int:
        """Return the user id for the request's bearer token (if any)."""


class DevelopmentOverrideStrategy(IdentityStrategy):
    """Operator-supplied user id, or a fixed default. Ignores credentials."""

    def __init__(self, override_user_id: int | None = None, default_user_id: int = 1) -> None:
        self.override_user_id = override_user_id
        self.default_user_id = default_user_id

    def resolve(self, token: str | None) -> int:
        if self.override_user_id is not None:
            return self.override_user_id
        return self.default_user_id


class SessionCredentialStrategy(IdentityStrategy):
    """Verifies a signed access token and returns its subject."""

    def __init__(self, secret_key: str, algorithm: str = "HS256") -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm

    def resolve(self, token: str | None) -> int:
        if not self.secret_key:
            # Fail closed: never hand out a default identity in production
            raise IdentityConfigurationError(
                "Session authentication is not configured (JWT_SECRET_KEY is empty)"
            )
        if not token:
            raise AuthenticationError("Missing bearer token")

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            logger.debug("Token expired")
            raise AuthenticationError("Token expired") from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid token: {e}")
            raise AuthenticationError("Invalid token") from e

        if payload.get("type") != "access":
            raise AuthenticationError("Invalid token type")

        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError) as e:
            raise AuthenticationError("Invalid token subject") from e


def build_identity_strategy(settings: Settings) -> IdentityStrategy:
    """Pick the identity strategy for the deployment mode.

    Production always verifies session credentials; the development override
    settings are not consulted there.
    """
    if settings.is_production:
        if not settings.jwt_secret_key:
            logger.warning("JWT_SECRET_KEY is not set: every tenant request will be refused")
        return SessionCredentialStrategy(settings.jwt_secret_key, settings.jwt_algorithm)

    logger.info(
        "Using development identity (override=%s, default=%s)",
        settings.dev_user_id,
        settings.default_dev_user_id,
    )
    return DevelopmentOverrideStrategy(settings.dev_user_id, settings.default_dev_user_id)
