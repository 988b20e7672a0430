from .service import AuthService, get_auth_service
from .models import (
    AuthSession,
    VerifiedWallet,
    AuthError,
    SessionExpiredError,
    SessionRevokedError,
    InvalidSignatureError,
    InvalidNonceError,
    TokenPayload,
)
from .middleware import (
    require_auth,
    get_current_wallet,
)

__all__ = [
    "AuthService",
    "get_auth_service",
    "AuthSession",
    "VerifiedWallet",
    "AuthError",
    "SessionExpiredError",
    "SessionRevokedError",
    "InvalidSignatureError",
    "InvalidNonceError",
    "TokenPayload",
    "require_auth",
    "get_current_wallet",
]
