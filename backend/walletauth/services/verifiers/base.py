from typing import Protocol, runtime_checkable


@runtime_checkable
class SignatureVerifier(Protocol):
    """Protocol for the per-scheme signature checks used by AuthService."""

    scheme: str

    def normalize_address(self, address: str) -> str:
        """
        Return the canonical form of an address for this scheme.

        Raises:
            InvalidAddressError: If the address is not valid for the scheme
        """
        ...

    def is_valid_address(self, address: str) -> bool:
        ...

    def verify(self, address: str, signature: str, nonce: str) -> bool:
        """
        Check that signature signs nonce under the key behind address.

        Never raises for malformed input; returns False instead.
        """
        ...
