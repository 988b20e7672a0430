"""
Tests for Sign-In with Ethereum sessions.

Messages are signed locally with a throwaway account, so the whole
nonce -> verify -> session -> token round trip runs offline.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from siwe import SiweMessage

from app.auth.models import (
    AuthError,
    InvalidNonceError,
    InvalidSignatureError,
    SessionExpiredError,
    SessionRevokedError,
    VerifiedWallet,
)
from app.auth.service import JWT_ALGORITHM, AuthService
from app.config import Settings

SECRET = "test-jwt-secret"
DOMAIN = "localhost:3000"


def build_message(address: str, nonce: str, domain: str = DOMAIN, chain_id: int = 31337) -> str:
    return SiweMessage(
        domain=domain,
        address=address,
        statement="Sign in to the onchain chat agent.",
        uri=f"http://{domain}",
        version="1",
        chain_id=chain_id,
        nonce=nonce,
        issued_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z"),
    ).prepare_message()


def sign(account, message: str) -> str:
    signed = account.sign_message(encode_defunct(text=message))
    return "0x" + bytes(signed.signature).hex()


@pytest.fixture
def account():
    return Account.create()


@pytest.fixture
def service():
    return AuthService(Settings(auth_jwt_secret=SECRET, siwe_domain=DOMAIN))


class TestAuthService:

    def test_secret_required(self):
        with pytest.raises(ValueError, match="AUTH_JWT_SECRET"):
            AuthService(Settings(auth_jwt_secret=""))

    @pytest.mark.asyncio
    async def test_round_trip(self, service, account):
        issued = await service.generate_nonce(account.address)
        message = build_message(account.address, issued["nonce"])

        wallet = await service.verify_signature(message, sign(account, message))
        session = await service.create_session(wallet)
        payload = await service.verify_access_token(session.access_token)

        assert wallet.address == account.address.lower()
        assert wallet.chain_id == 31337
        assert payload.sub == account.address.lower()
        assert payload.session_id == session.session_id
        assert payload.chain_id == 31337

    @pytest.mark.asyncio
    async def test_nonce_is_single_use(self, service, account):
        issued = await service.generate_nonce(account.address)
        message = build_message(account.address, issued["nonce"])
        signature = sign(account, message)

        await service.verify_signature(message, signature)
        with pytest.raises(InvalidNonceError):
            await service.verify_signature(message, signature)

    @pytest.mark.asyncio
    async def test_unknown_nonce(self, service, account):
        message = build_message(account.address, "a1b2c3d4e5f6a7b8")
        with pytest.raises(InvalidNonceError):
            await service.verify_signature(message, sign(account, message))

    @pytest.mark.asyncio
    async def test_signature_from_other_account(self, service, account):
        issued = await service.generate_nonce(account.address)
        message = build_message(account.address, issued["nonce"])

        with pytest.raises(InvalidSignatureError):
            await service.verify_signature(message, sign(Account.create(), message))

    @pytest.mark.asyncio
    async def test_domain_mismatch(self, service, account):
        issued = await service.generate_nonce(account.address)
        message = build_message(account.address, issued["nonce"], domain="evil.example")

        with pytest.raises(InvalidSignatureError):
            await service.verify_signature(message, sign(account, message))

    @pytest.mark.asyncio
    async def test_malformed_message(self, service):
        with pytest.raises(InvalidSignatureError):
            await service.verify_signature("hello", "0x00")

    @pytest.mark.asyncio
    async def test_revoked_session(self, service, account):
        issued = await service.generate_nonce(account.address)
        message = build_message(account.address, issued["nonce"])
        session = await service.create_session(await service.verify_signature(message, sign(account, message)))

        await service.revoke_session(session.session_id)

        with pytest.raises(SessionRevokedError):
            await service.verify_access_token(session.access_token)

    @pytest.mark.asyncio
    async def test_expired_token(self, service):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "0xabc", "session_id": "s", "chain_id": 1, "type": "access",
             "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
            SECRET,
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(SessionExpiredError):
            await service.verify_access_token(token)

    @pytest.mark.asyncio
    async def test_wrong_token_type(self, service):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "0xabc", "session_id": "s", "chain_id": 1, "type": "refresh",
             "iat": now, "exp": now + timedelta(hours=1)},
            SECRET,
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(AuthError, match="Invalid token type"):
            await service.verify_access_token(token)

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret(self, service):
        other = AuthService(Settings(auth_jwt_secret="another-secret"))
        wallet_session = await other.create_session(VerifiedWallet(address="0xabc", chain_id=1))
        with pytest.raises(AuthError):
            await service.verify_access_token(wallet_session.access_token)
