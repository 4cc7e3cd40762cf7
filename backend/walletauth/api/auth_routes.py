from typing import Callable
from fastapi import APIRouter, Depends

from walletauth.api.dependencies import get_db_client, get_address_locks
from walletauth.handlers.auth_handler import AuthHandler
from walletauth.repositories.nonce_repo import NonceRepository
from walletauth.schemas.auth_schema import NonceResponse, VerificationRequest, VerificationResponse
from walletauth.services.address_lock import AddressLockRegistry
from walletauth.services.auth_service import AuthService
from walletauth.services.nonce_service import NonceService
from walletauth.services.verifiers.base import SignatureVerifier
from walletauth.services.verifiers.ed25519_verifier import Ed25519SignatureVerifier
from walletauth.services.verifiers.evm_verifier import EVMSignatureVerifier


def create_auth_router(verifier_factory: Callable[[], SignatureVerifier], tag: str) -> APIRouter:
    """
    Build the nonce/verify router for one signature scheme.

    Args:
        verifier_factory: Callable returning the scheme's verifier
        tag: OpenAPI tag for the router

    Returns:
        Router mounted at /auth/<scheme>
    """
    scheme = verifier_factory().scheme
    router = APIRouter(
        prefix=f"/auth/{scheme}",
        tags=[tag],
        responses={404: {"description": "Not found"}},
    )

    def get_auth_handler(
        db_client=Depends(get_db_client),
        locks: AddressLockRegistry = Depends(get_address_locks)
    ) -> AuthHandler:
        """Dependency to get the auth handler with all required dependencies."""
        nonce_service = NonceService(NonceRepository(db_client))
        auth_service = AuthService(nonce_service, verifier_factory(), locks)
        return AuthHandler(auth_service)

    @router.get("/nonce/{wallet_address}", response_model=NonceResponse)
    async def get_nonce(
        wallet_address: str,
        auth_handler: AuthHandler = Depends(get_auth_handler)
    ) -> NonceResponse:
        """
        Get the outstanding nonce for a wallet address, creating it on first use.

        Args:
            wallet_address: The wallet address to get a nonce for

        Returns:
            NonceResponse containing wallet address and nonce
        """
        return await auth_handler.get_nonce(wallet_address)

    @router.post("/verify", response_model=VerificationResponse)
    async def verify(
        request: VerificationRequest,
        auth_handler: AuthHandler = Depends(get_auth_handler)
    ) -> VerificationResponse:
        """
        Verify a signature over the outstanding nonce.

        Args:
            request: Wallet address and signature

        Returns:
            VerificationResponse; failures are reported as 401
        """
        result = await auth_handler.verify(request)
        return VerificationResponse(**result)

    return router


evm_router = create_auth_router(EVMSignatureVerifier, "EVM Authentication")
ed25519_router = create_auth_router(Ed25519SignatureVerifier, "Ed25519 Authentication")
