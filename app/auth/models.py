"""
Authentication models and exceptions.
"""

from datetime import datetime
from pydantic import BaseModel


class AuthError(Exception):
    """Base authentication error."""
    pass


class SessionExpiredError(AuthError):
    """Session has expired."""
    pass


class SessionRevokedError(AuthError):
    """Session was logged out."""
    pass


class InvalidSignatureError(AuthError):
    """SIWE message or signature is invalid."""
    pass


class InvalidNonceError(AuthError):
    """Nonce is invalid or expired."""
    pass


class VerifiedWallet(BaseModel):
    """Wallet verified via SIWE signature."""
    address: str
    chain_id: int


class AuthSession(BaseModel):
    """Authenticated session."""
    session_id: str
    wallet_address: str
    chain_id: int
    access_token: str
    expires_at: datetime


class NonceRequest(BaseModel):
    """Request for nonce generation."""
    wallet_address: str


class NonceResponse(BaseModel):
    """Response with nonce for wallet sign-in."""
    nonce: str
    expires_at: datetime


class VerifyRequest(BaseModel):
    """Request to verify SIWE signature."""
    message: str
    signature: str


class TokenPayload(BaseModel):
    """JWT token payload."""
    sub: str  # wallet address
    session_id: str
    chain_id: int
    exp: int  # expiration timestamp
    iat: int  # issued at timestamp
    type: str = "access"
