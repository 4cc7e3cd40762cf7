import logging
from eth_account.messages import encode_defunct
from web3 import Web3

from walletauth.exceptions import InvalidAddressError

logger = logging.getLogger(__name__)


class EVMSignatureVerifier:
    """
    Verifies EVM personal-message signatures (personal_sign).
    The signed message is the raw nonce; encode_defunct applies the
    "\\x19Ethereum Signed Message:\\n<len>" prefix before hashing.
    """

    scheme = "evm"

    def __init__(self):
        # Signature recovery needs no provider
        self.web3 = Web3()

    def normalize_address(self, address: str) -> str:
        """
        Convert an address to its EIP-55 checksum form.

        Args:
            address: Hex address, checksummed or lowercase

        Returns:
            Checksummed address

        Raises:
            InvalidAddressError: If the address is not a 20-byte hex address
        """
        if not isinstance(address, str):
            raise InvalidAddressError(self.scheme, address)

        # Hex addresses are case-insensitive; a wrong checksum is not an error here
        candidate = address.strip().lower()
        if not Web3.is_address(candidate):
            raise InvalidAddressError(self.scheme, address)
        return Web3.to_checksum_address(candidate)

    def is_valid_address(self, address: str) -> bool:
        try:
            self.normalize_address(address)
            return True
        except InvalidAddressError:
            return False

    def recover_address(self, signature: str, nonce: str) -> str:
        """
        Recover the signer of a personal-message signature over nonce.

        Args:
            signature: Hex encoded 65-byte signature
            nonce: The message that was signed

        Returns:
            Checksummed address of the signer
        """
        message = encode_defunct(text=nonce)
        return self.web3.eth.account.recover_message(message, signature=signature)

    def verify(self, address: str, signature: str, nonce: str) -> bool:
        """
        Verify a signature against a nonce.

        Args:
            address: The wallet address that claims to have signed
            signature: The signature to verify
            nonce: The nonce that was signed

        Returns:
            True if signature is valid, False otherwise
        """
        try:
            recovered_address = self.recover_address(signature, nonce)

            # Compare recovered address with provided address (case-insensitive)
            return recovered_address.lower() == address.lower()

        except Exception as e:
            logger.warning(f"Rejected EVM signature for {str(address)[:10]}...: {str(e)}")
            return False
