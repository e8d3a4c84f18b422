"""Authentication and identity resolution services."""

from .identity import (
    AuthenticationError,
    DevelopmentOverrideStrategy,
    IdentityConfigurationError,
    IdentityStrategy,
    SessionCredentialStrategy,
    build_identity_strategy,
)

__all__ = [
    "AuthenticationError",
    "DevelopmentOverrideStrategy",
    "IdentityConfigurationError",
    "IdentityStrategy",
    "SessionCredentialStrategy",
    "build_identity_strategy",
]
