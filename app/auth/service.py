"""
Authentication service using Sign-In with Ethereum (EIP-4361).
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from siwe import SiweMessage, VerificationError

from app.cache import TTLCache
from app.config import Settings

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

JWT_ALGORITHM = "HS256"

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service using wallet sign-in.

    Flow:
    1. Client requests nonce via POST /api/auth/nonce
    2. Client signs a SIWE message containing the nonce
    3. Client sends message + signature to POST /api/auth/verify
    4. Server verifies and returns a JWT access token
    5. Client uses the access token as a Bearer token for /api/chat

    Nonces and revoked sessions live in process memory.
    """

    def __init__(
        self,
        config: Settings,
        nonce_store: Optional[TTLCache] = None,
        revoked_store: Optional[TTLCache] = None,
    ):
        if not config.auth_jwt_secret:
            raise ValueError(
                "AUTH_JWT_SECRET must be set for JWT signing. "
                "This is required for authentication security."
            )
        self.config = config
        self._secret = config.auth_jwt_secret
        self._token_ttl = timedelta(minutes=config.access_token_expire_minutes)
        self._nonces = nonce_store or TTLCache(default_ttl=config.nonce_ttl_seconds)
        self._revoked = revoked_store or TTLCache(default_ttl=int(self._token_ttl.total_seconds()))

    async def generate_nonce(self, wallet_address: str) -> dict:
        """
        Generate a unique nonce for wallet sign-in.

        The nonce expires after ``nonce_ttl_seconds``.
        """
        # EIP-4361 requires an alphanumeric nonce
        nonce = secrets.token_hex(16)
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=self.config.nonce_ttl_seconds)

        await self._nonces.set(
            self._nonce_key(wallet_address, nonce),
            True,
            ttl=self.config.nonce_ttl_seconds,
        )

        return {
            "nonce": nonce,
            "expires_at": expires_at,
        }

    async def verify_signature(self, message: str, signature: str) -> VerifiedWallet:
        """
        Verify a SIWE message signature and return the verified wallet.
        """
        try:
            siwe_message = SiweMessage.from_message(message)
        except ValueError as e:
            raise InvalidSignatureError(f"Malformed SIWE message: {e}")

        try:
            siwe_message.verify(signature, domain=self.config.siwe_domain)
        except VerificationError as e:
            raise InvalidSignatureError(f"Signature verification failed: {e}")

        consumed = await self._nonces.pop(self._nonce_key(siwe_message.address, siwe_message.nonce))
        if not consumed:
            raise InvalidNonceError("Nonce is invalid or expired")

        return VerifiedWallet(
            address=siwe_message.address.lower(),
            chain_id=int(siwe_message.chain_id),
        )

    async def create_session(self, wallet: VerifiedWallet) -> AuthSession:
        """
        Create a new authenticated session for a verified wallet.
        """
        session_id = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        expires_at = now + self._token_ttl

        access_token = jwt.encode(
            {
                "sub": wallet.address,
                "session_id": session_id,
                "chain_id": wallet.chain_id,
                "exp": expires_at,
                "iat": now,
                "type": "access",
            },
            self._secret,
            algorithm=JWT_ALGORITHM,
        )

        logger.info("Session created for %s on chain %s", wallet.address, wallet.chain_id)

        return AuthSession(
            session_id=session_id,
            wallet_address=wallet.address,
            chain_id=wallet.chain_id,
            access_token=access_token,
            expires_at=expires_at,
        )

    async def verify_access_token(self, token: str) -> TokenPayload:
        """
        Verify an access token and return the payload.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise SessionExpiredError("Access token has expired")
        except jwt.InvalidTokenError as e:
            raise AuthError(f"Invalid access token: {e}")

        if payload.get("type") != "access":
            raise AuthError("Invalid token type")

        if await self._revoked.get(payload["session_id"]):
            raise SessionRevokedError("Session has been revoked")

        return TokenPayload(
            sub=payload["sub"],
            session_id=payload["session_id"],
            chain_id=payload["chain_id"],
            exp=payload["exp"],
            iat=payload["iat"],
            type="access",
        )

    async def revoke_session(self, session_id: str) -> None:
        """
        Revoke a session (logout).
        """
        await self._revoked.set(session_id, True)

    @staticmethod
    def _nonce_key(wallet_address: str, nonce: str) -> str:
        return f"{wallet_address.lower()}:{nonce}"


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        from app.config import settings
        _auth_service = AuthService(settings)
    return _auth_service
