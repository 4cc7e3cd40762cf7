from fastapi import APIRouter, Request

from walletauth.schemas.auth_schema import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Report whether the storage backend is reachable."""
    db_client = getattr(request.app.state, "db_client", None)
    database_ok = db_client is not None and await db_client.ping()
    return HealthResponse(status="ok" if database_ok else "degraded", database=database_ok)
