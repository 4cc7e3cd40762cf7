"""
Wallet authentication exceptions.

Credential problems (InvalidAddressError, MalformedCredentialError) are
absorbed by the verification flow and reported as a failed verification.
StorageError signals an infrastructure failure and always propagates.
"""


class WalletAuthError(Exception):
    """Base exception for wallet authentication."""


class StorageError(WalletAuthError):
    """Raised when the nonce store cannot be read or written."""

    def __init__(self, operation: str, message: str):
        """
        Initialize storage error.

        Args:
            operation: Name of the storage operation that failed
            message: Underlying error message
        """
        super().__init__(f"Storage failure during {operation}: {message}")
        self.operation = operation


class InvalidAddressError(WalletAuthError):
    """Raised when an address is not valid for the requested scheme."""

    def __init__(self, scheme: str, address: str):
        super().__init__(f"Invalid {scheme} address: {address!r}")
        self.scheme = scheme
        self.address = address


class MalformedCredentialError(WalletAuthError):
    """Raised when a signature or key cannot be decoded for its scheme."""
