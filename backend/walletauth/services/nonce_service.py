from typing import Optional
import logging
import uuid

from walletauth.exceptions import StorageError
from walletauth.repositories.nonce_repo import NonceRepository

logger = logging.getLogger(__name__)


def generate_nonce() -> str:
    """Return a fresh random nonce (UUID4, 122 random bits)."""
    return str(uuid.uuid4())


class NonceService:
    """
    Service for the nonce lifecycle of identity records.
    Records are created lazily on the first nonce request and the nonce is
    replaced after every successful verification.
    """

    def __init__(self, nonce_repository: NonceRepository):
        """
        Initialize with repository.

        Args:
            nonce_repository: Repository for identity record access
        """
        self.nonce_repository = nonce_repository

    async def get(self, wallet_address: str) -> Optional[str]:
        """
        Look up the outstanding nonce for a wallet address.

        Args:
            wallet_address: Canonical wallet address

        Returns:
            The nonce, or None if the address has no record
        """
        auth_record = await self.nonce_repository.get_auth_record(wallet_address)
        if not auth_record:
            return None
        return auth_record.get("nonce")

    async def get_or_create(self, wallet_address: str, scheme: str) -> str:
        """
        Return the outstanding nonce, creating the record if needed.

        Args:
            wallet_address: Canonical wallet address
            scheme: Signature scheme the address belongs to

        Returns:
            The current nonce for the address
        """
        nonce = await self.get(wallet_address)
        if nonce is not None:
            return nonce

        created = await self.nonce_repository.insert_if_absent(
            wallet_address,
            {"nonce": generate_nonce(), "scheme": scheme}
        )
        if created:
            logger.info(f"Created {scheme} identity record for {wallet_address}")

        # Re-read so concurrent creators all return the record that won
        nonce = await self.get(wallet_address)
        if nonce is None:
            raise StorageError("get_or_create", f"record for {wallet_address} missing after insert")
        return nonce

    async def rotate(self, wallet_address: str, expected_nonce: Optional[str] = None) -> bool:
        """
        Replace the nonce of an existing record.

        Args:
            wallet_address: Canonical wallet address
            expected_nonce: Nonce that must still be stored for the rotation to apply

        Returns:
            True if the nonce was replaced, False if no matching record existed
        """
        rotated = await self.nonce_repository.update_nonce(
            wallet_address,
            generate_nonce(),
            expected_nonce=expected_nonce
        )
        if not rotated:
            logger.warning(f"Nonce rotation skipped for {wallet_address}: no matching record")
        return rotated
