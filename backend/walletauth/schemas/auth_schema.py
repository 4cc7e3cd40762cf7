from pydantic import BaseModel, Field


class WalletBase(BaseModel):
    wallet_address: str = Field(..., description="Wallet address used for authentication (hex for EVM, base58 for Ed25519)")


class NonceResponse(WalletBase):
    nonce: str = Field(..., description="One-time nonce the wallet must sign")


class VerificationRequest(WalletBase):
    signature: str = Field(..., description="Signature over the nonce produced by the wallet (hex for EVM, base58 for Ed25519)")


class VerificationResponse(BaseModel):
    status: str = Field(..., description="Status of the verification request")
    message: str = Field(..., description="Message describing the verification result")
    wallet_address: str = Field(..., description="Wallet address that was verified")
    verified: bool = Field(..., description="Whether the signature proved ownership of the address")


class HealthResponse(BaseModel):
    status: str = Field(..., description="ok when storage is reachable, degraded otherwise")
    database: bool = Field(..., description="Whether the storage backend answered a ping")
