from typing import Dict, Any
from fastapi import HTTPException
import logging
from walletauth.exceptions import InvalidAddressError, StorageError
from walletauth.services.auth_service import AuthService
from walletauth.schemas.auth_schema import VerificationRequest

logger = logging.getLogger(__name__)

VERIFICATION_FAILED = "Signature verification failed"
STORAGE_UNAVAILABLE = "Authentication storage unavailable"


class AuthHandler:
    """
    Handler for nonce authentication operations.
    Acts as a bridge between API routes and the auth service layer.
    """

    def __init__(self, auth_service: AuthService):
        """
        Initialize with auth service.

        Args:
            auth_service: Service for one signature scheme
        """
        self.auth_service = auth_service

    async def get_nonce(self, wallet_address: str) -> Dict[str, Any]:
        """
        Get or generate nonce for a wallet address.

        Args:
            wallet_address: The wallet address to get nonce for

        Returns:
            Dict containing nonce information

        Raises:
            HTTPException: If the address is invalid or nonce retrieval fails
        """
        try:
            nonce_response = await self.auth_service.issue_nonce(wallet_address)

            return {
                "wallet_address": nonce_response.wallet_address,
                "nonce": nonce_response.nonce
            }

        except InvalidAddressError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except StorageError as e:
            logger.error(f"Storage error getting nonce: {str(e)}")
            raise HTTPException(status_code=503, detail=STORAGE_UNAVAILABLE)
        except Exception as e:
            logger.error(f"Error getting nonce: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Error getting nonce: {str(e)}")

    async def verify(self, request: VerificationRequest) -> Dict[str, Any]:
        """
        Verify a signed nonce.

        Args:
            request: Verification request data

        Returns:
            Dict containing verification result

        Raises:
            HTTPException: 401 if verification fails, 503 if storage is unavailable
        """
        try:
            verified = await self.auth_service.verify(
                wallet_address=request.wallet_address,
                signature=request.signature
            )

            if not verified:
                raise HTTPException(status_code=401, detail=VERIFICATION_FAILED)

            return {
                "status": "success",
                "message": "Signature verified",
                "wallet_address": request.wallet_address,
                "verified": True
            }

        except HTTPException:
            raise
        except StorageError as e:
            logger.error(f"Storage error verifying signature: {str(e)}")
            raise HTTPException(status_code=503, detail=STORAGE_UNAVAILABLE)
        except Exception as e:
            logger.error(f"Error verifying signature: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Error verifying signature: {str(e)}")
