from fastapi import Request, HTTPException

from walletauth.database import DatabaseClient
from walletauth.services.address_lock import AddressLockRegistry


def get_db_client(request: Request) -> DatabaseClient:
    """Dependency returning the database client opened by the app lifespan."""
    db_client = getattr(request.app.state, "db_client", None)
    if db_client is None:
        raise HTTPException(status_code=503, detail="Authentication storage unavailable")
    return db_client


def get_address_locks(request: Request) -> AddressLockRegistry:
    """Dependency returning the lock registry shared by every request."""
    return request.app.state.address_locks
