from typing import Optional
import logging

from walletauth.exceptions import InvalidAddressError
from walletauth.schemas.auth_schema import NonceResponse
from walletauth.services.address_lock import AddressLockRegistry
from walletauth.services.nonce_service import NonceService
from walletauth.services.verifiers.base import SignatureVerifier

logger = logging.getLogger(__name__)


class AuthService:
    """
    Challenge/response authentication for one signature scheme.
    Issues nonces, verifies signatures over them with the scheme's verifier
    and rotates the nonce after each successful verification.
    """

    def __init__(
        self,
        nonce_service: NonceService,
        verifier: SignatureVerifier,
        locks: Optional[AddressLockRegistry] = None
    ):
        """
        Initialize with collaborators.

        Args:
            nonce_service: Nonce store shared by every scheme
            verifier: Signature check for this scheme
            locks: Per-address lock registry; share one instance between
                services that may see the same address
        """
        self.nonce_service = nonce_service
        self.verifier = verifier
        self.locks = locks if locks is not None else AddressLockRegistry()

    @property
    def scheme(self) -> str:
        return self.verifier.scheme

    async def issue_nonce(self, wallet_address: str) -> NonceResponse:
        """
        Get or create the outstanding nonce for a wallet address.

        Args:
            wallet_address: The wallet address to issue a nonce for

        Returns:
            Nonce response with canonical wallet address and nonce

        Raises:
            InvalidAddressError: If the address is not valid for this scheme
            StorageError: If the nonce store is unavailable
        """
        address = self.verifier.normalize_address(wallet_address)

        async with self.locks.hold(address):
            nonce = await self.nonce_service.get_or_create(address, self.scheme)

        return NonceResponse(wallet_address=address, nonce=nonce)

    async def verify(self, wallet_address: str, signature: str) -> bool:
        """
        Verify a signature over the outstanding nonce and consume it.

        Unknown addresses, malformed credentials and signature mismatches
        all return False. Storage failures propagate as StorageError.

        Args:
            wallet_address: The wallet address that claims to have signed
            signature: The signature over the nonce

        Returns:
            True if the signature is valid, False otherwise
        """
        try:
            address = self.verifier.normalize_address(wallet_address)
        except InvalidAddressError:
            logger.info(f"{self.scheme} verification rejected: malformed address")
            return False

        async with self.locks.hold(address):
            nonce = await self.nonce_service.get(address)
            if nonce is None:
                logger.info(f"{self.scheme} verification rejected: no outstanding nonce")
                return False

            if not self.verifier.verify(address, signature, nonce):
                return False

            # Consume the nonce before reporting success
            if not await self.nonce_service.rotate(address, expected_nonce=nonce):
                logger.warning(f"Nonce for {address} was consumed concurrently")
                return False

        logger.info(f"{self.scheme} signature verified for {address}")
        return True
