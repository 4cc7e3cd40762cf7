from walletauth.api.auth_routes import evm_router, ed25519_router
from walletauth.api.health_routes import router as health_router

__all__ = ["evm_router", "ed25519_router", "health_router"]
