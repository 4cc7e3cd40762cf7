from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from walletauth.api import evm_router, ed25519_router, health_router
from walletauth.config import Settings, settings
from walletauth.database import DatabaseClient
from walletauth.exceptions import StorageError
from walletauth.repositories.nonce_repo import NonceRepository
from walletauth.services.address_lock import AddressLockRegistry

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment settings

    Returns:
        Configured FastAPI app
    """
    app_settings = app_settings or settings

    # Define lifespan context manager
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: open storage and create indexes
        db_client = DatabaseClient(app_settings).connect()
        app.state.db_client = db_client
        app.state.address_locks = AddressLockRegistry()

        try:
            await NonceRepository(db_client).create_indexes()
            logging.info("Auth indexes created successfully")
        except StorageError as e:
            logging.error(f"Error creating auth indexes: {e}")

        yield

        # Shutdown: Clean up resources
        db_client.close()
        app.state.db_client = None
        logging.info("Database connection closed")

    app = FastAPI(
        title="Wallet Nonce Auth API",
        debug=app_settings.debug,
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {"message": "Wallet nonce authentication API"}

    # Include API routers
    for router in (evm_router, ed25519_router, health_router):
        app.include_router(router, prefix="/api")

    return app


app = create_app()
