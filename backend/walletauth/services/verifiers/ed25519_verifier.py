import logging
import base58
from nacl.signing import VerifyKey
from nacl.exceptions import BadSignatureError

from walletauth.exceptions import InvalidAddressError, MalformedCredentialError

logger = logging.getLogger(__name__)

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


def decode_base58(value: str, expected_length: int, label: str) -> bytes:
    """
    Decode a base58 string and check its decoded length.

    Raises:
        MalformedCredentialError: If the value is not base58 or has the wrong length
    """
    if not isinstance(value, str) or not value:
        raise MalformedCredentialError(f"{label} must be a non-empty base58 string")
    try:
        decoded = base58.b58decode(value)
    except ValueError as e:
        raise MalformedCredentialError(f"{label} is not valid base58: {e}") from e
    if len(decoded) != expected_length:
        raise MalformedCredentialError(
            f"{label} decodes to {len(decoded)} bytes, expected {expected_length}"
        )
    return decoded


class Ed25519SignatureVerifier:
    """
    Verifies detached Ed25519 signatures from Solana-style wallets.
    Addresses are base58 encoded public keys; the signed message is the
    UTF-8 encoding of the nonce.
    """

    scheme = "ed25519"

    def normalize_address(self, address: str) -> str:
        """
        Validate a base58 public key. Base58 is case-sensitive, so the
        canonical form is the address as given.

        Raises:
            InvalidAddressError: If the address is not a base58 32-byte key
        """
        try:
            decode_base58(address, PUBLIC_KEY_LENGTH, "address")
        except MalformedCredentialError:
            raise InvalidAddressError(self.scheme, address)
        return address

    def is_valid_address(self, address: str) -> bool:
        try:
            self.normalize_address(address)
            return True
        except InvalidAddressError:
            return False

    def verify(self, address: str, signature: str, nonce: str) -> bool:
        """
        Verify a detached signature over the nonce.

        Args:
            address: Base58 encoded 32-byte public key
            signature: Base58 encoded 64-byte signature
            nonce: The nonce that was signed

        Returns:
            True if signature is valid, False otherwise
        """
        try:
            public_key = decode_base58(address, PUBLIC_KEY_LENGTH, "address")
            signature_bytes = decode_base58(signature, SIGNATURE_LENGTH, "signature")

            VerifyKey(public_key).verify(nonce.encode("utf-8"), signature_bytes)
            return True

        except BadSignatureError:
            logger.warning(f"Invalid Ed25519 signature for {str(address)[:8]}...")
            return False
        except MalformedCredentialError as e:
            logger.warning(f"Malformed Ed25519 credential: {str(e)}")
            return False
        except Exception as e:
            logger.error(f"Ed25519 verification error: {str(e)}")
            return False
