# conftest.py
import pytest
import pytest_asyncio
import base58
from unittest.mock import MagicMock, AsyncMock
from eth_account import Account
from eth_account.messages import encode_defunct
from nacl.signing import SigningKey

from walletauth.config import Settings
from walletauth.database import DatabaseClient
from walletauth.repositories.nonce_repo import NonceRepository


@pytest.fixture
def memory_settings():
    """Settings selecting the in-memory storage backend."""
    return Settings(DATABASE_BACKEND="memory", MONGO_DB_NAME="walletauth_test")


# Database and Repository Mocks
@pytest.fixture
def mock_db_client():
    """Create mock database client with an async auth collection."""
    client = MagicMock()
    client.auth_collection = MagicMock()
    client.auth_collection.find_one = AsyncMock()
    client.auth_collection.update_one = AsyncMock()
    client.auth_collection.create_indexes = AsyncMock()
    return client


@pytest_asyncio.fixture
async def memory_db_client(memory_settings):
    """Connected in-memory database client with indexes created."""
    client = DatabaseClient(memory_settings).connect()
    await NonceRepository(client).create_indexes()
    yield client
    client.close()


@pytest.fixture
def mock_nonce_repo():
    """Create mock NonceRepository."""
    repo = MagicMock()
    repo.create_indexes = AsyncMock()
    repo.get_auth_record = AsyncMock()
    repo.insert_if_absent = AsyncMock()
    repo.update_nonce = AsyncMock()
    return repo


# Service Mocks
@pytest.fixture
def mock_nonce_service():
    """Create mock NonceService."""
    service = MagicMock()
    service.get = AsyncMock()
    service.get_or_create = AsyncMock()
    service.rotate = AsyncMock()
    return service


@pytest.fixture
def mock_verifier():
    """Create mock SignatureVerifier that accepts addresses as given."""
    verifier = MagicMock()
    verifier.scheme = "evm"
    verifier.normalize_address = MagicMock(side_effect=lambda address: address)
    verifier.is_valid_address = MagicMock(return_value=True)
    verifier.verify = MagicMock()
    return verifier


@pytest.fixture
def mock_auth_service():
    """Create mock AuthService."""
    service = MagicMock()
    service.scheme = "evm"
    service.issue_nonce = AsyncMock()
    service.verify = AsyncMock()
    return service


# Wallet fixtures
@pytest.fixture
def evm_account():
    """Return a freshly generated EVM account."""
    return Account.create()


@pytest.fixture
def sign_evm():
    """Return a helper producing a hex personal_sign signature over a text message."""
    def _sign(account, text: str) -> str:
        signed = account.sign_message(encode_defunct(text=text))
        return "0x" + bytes(signed.signature).hex()
    return _sign


@pytest.fixture
def ed25519_key():
    """Return a freshly generated Ed25519 signing key."""
    return SigningKey.generate()


@pytest.fixture
def ed25519_address(ed25519_key):
    """Return the base58 address of the Ed25519 test key."""
    return base58.b58encode(bytes(ed25519_key.verify_key)).decode()


@pytest.fixture
def sign_ed25519():
    """Return a helper producing a base58 detached signature over a text message."""
    def _sign(signing_key, text: str) -> str:
        return base58.b58encode(signing_key.sign(text.encode("utf-8")).signature).decode()
    return _sign


@pytest.fixture
def test_wallet_address():
    """Return a test wallet address."""
    return "0xa87a09e1c8E5F2256CDCAF96B2c3Dbff231D7D7f"
