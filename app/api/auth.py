"""
Authentication API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from app.auth import (
    AuthService,
    get_auth_service,
    AuthError,
    require_auth,
)
from app.auth.models import (
    NonceRequest,
    NonceResponse,
    VerifyRequest,
    TokenPayload,
)


router = APIRouter(prefix="/auth", tags=["auth"])


class AuthResponse(BaseModel):
    """Response after successful authentication."""
    access_token: str
    expires_at: str
    wallet_address: str
    chain_id: int


class SessionInfo(BaseModel):
    """Current session info."""
    wallet_address: str
    chain_id: int
    expires_at: int


@router.post("/nonce", response_model=NonceResponse)
async def get_nonce(
    request: NonceRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Generate a nonce for wallet sign-in.

    The client should use this nonce when creating the SIWE message.
    """
    result = await auth_service.generate_nonce(request.wallet_address)
    return NonceResponse(
        nonce=result["nonce"],
        expires_at=result["expires_at"],
    )


@router.post("/verify", response_model=AuthResponse)
async def verify_signature(
    request: VerifyRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Verify a SIWE signature and create a session.

    The client should:
    1. Create a SIWE message with the nonce from /auth/nonce
    2. Sign the message with the wallet
    3. Send the message and signature here

    Returns a JWT access token for authenticated requests.
    """
    try:
        wallet = await auth_service.verify_signature(
            message=request.message,
            signature=request.signature,
        )
        session = await auth_service.create_session(wallet)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    return AuthResponse(
        access_token=session.access_token,
        expires_at=session.expires_at.isoformat(),
        wallet_address=session.wallet_address,
        chain_id=session.chain_id,
    )


@router.get("/me", response_model=SessionInfo)
async def get_current_session(
    auth: TokenPayload = Depends(require_auth),
):
    """
    Get the current authenticated session info.
    """
    return SessionInfo(
        wallet_address=auth.sub,
        chain_id=auth.chain_id,
        expires_at=auth.exp,
    )


@router.post("/logout")
async def logout(
    auth: TokenPayload = Depends(require_auth),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Logout and revoke the current session.
    """
    await auth_service.revoke_session(auth.session_id)
    return {"message": "Successfully logged out"}
